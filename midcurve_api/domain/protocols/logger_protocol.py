"""LoggerProtocol definition for structured logging.

All logging in the API layer goes through this protocol so handlers stay
backend-agnostic. Implementations MUST emit structured key-value context
and MUST NOT log secrets (session tokens, API keys, signatures).

Usage:
    from midcurve_api.core.container import get_logger

    logger = get_logger()
    logger.info("Token discovered", token_id=token_id, chain_id=chain_id)

    request_logger = logger.bind(trace_id=trace_id, user_id=user.id)
    request_logger.warning("Pool metrics unavailable")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message (degraded but serving)."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (use context, not f-strings).
            error: Optional exception; adapters add error_type and error_message.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with context included in every call."""
        ...
