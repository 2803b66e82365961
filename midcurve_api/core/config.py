"""
Configuration management using Pydantic Settings.

Type-safe configuration loaded from environment variables.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Values consumed only by the services layer (database URL, RPC URLs,
  CoinGecko key) are carried as opaque pass-through values

Usage:
    from midcurve_api.core.config import settings

    if settings.is_development:
        ...
"""

import json
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from midcurve_api.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=3001,
        description="Server bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Midcurve API",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version (reported by the health endpoint)",
    )

    # API configuration
    api_prefix: str = Field(
        default="/api",
        description="Prefix under which all API routes are mounted",
    )

    # Authentication
    api_key_prefix: str = Field(
        default="mc_",
        description="Marker distinguishing API keys from session tokens in Bearer headers",
    )
    session_cookie_name: str = Field(
        default="authjs.session-token",
        description="Cookie carrying the session JWT",
    )
    session_secret: str | None = Field(
        default=None,
        description="Secret used to verify session JWTs (session auth disabled when unset)",
    )
    session_algorithm: str = Field(
        default="HS256",
        description="Session JWT signing algorithm",
    )

    # Services layer
    services_factory: str | None = Field(
        default=None,
        description="Import path ('module:callable') returning the ServiceHandles bundle",
    )
    database_url: str | None = Field(
        default=None,
        description="Database connection URL (consumed by the services layer)",
    )
    rpc_urls: dict[int, str] = Field(
        default_factory=dict,
        description='Per-chain RPC URLs as JSON, e.g. {"1": "https://..."}',
    )
    coingecko_api_key: str | None = Field(
        default=None,
        description="CoinGecko API key (consumed by the services layer)",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """
        Ensure the API prefix has a leading slash and no trailing slash.

        Args:
            v: Prefix string.

        Returns:
            str: Normalized prefix.
        """
        return "/" + v.strip("/")

    @field_validator("api_key_prefix")
    @classmethod
    def validate_api_key_prefix(cls, v: str) -> str:
        """
        Reject an empty API key prefix.

        Args:
            v: Prefix string.

        Returns:
            str: The prefix.

        Raises:
            ValueError: If the prefix is empty.
        """
        if not v:
            raise ValueError("api_key_prefix must not be empty")
        return v

    @field_validator("rpc_urls", mode="before")
    @classmethod
    def parse_rpc_urls(cls, v: object) -> object:
        """
        Accept the RPC URL map as a JSON string.

        Args:
            v: Raw value.

        Returns:
            object: Parsed mapping, or the value unchanged.
        """
        if isinstance(v, str):
            return json.loads(v) if v.strip() else {}
        return v

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def session_auth_enabled(self) -> bool:
        """Whether session JWTs can be verified at all."""
        return bool(self.session_secret)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


settings = get_settings()
