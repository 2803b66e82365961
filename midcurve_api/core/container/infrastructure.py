"""Infrastructure dependency factories.

Application-scoped singletons:
- Logging (structlog console adapter)
- Session token verification (PyJWT)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from midcurve_api.core.config import Settings, settings

if TYPE_CHECKING:
    from midcurve_api.domain.protocols.logger_protocol import LoggerProtocol
    from midcurve_api.infrastructure.security.session_token_service import (
        SessionTokenService,
    )


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get logger singleton (app-scoped).

    Development gets the colored console renderer; every other environment
    gets JSON lines.

    Returns:
        Logger implementing LoggerProtocol.
    """
    from midcurve_api.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


def build_session_token_service(
    app_settings: Settings,
) -> "SessionTokenService | None":
    """Build the session verifier, or None when no session secret is configured.

    Args:
        app_settings: Settings the application was created with.

    Returns:
        SessionTokenService or None.
    """
    if not app_settings.session_auth_enabled:
        return None

    from midcurve_api.infrastructure.security.session_token_service import (
        SessionTokenService,
    )

    return SessionTokenService(
        secret_key=app_settings.session_secret or "",
        algorithm=app_settings.session_algorithm,
    )
