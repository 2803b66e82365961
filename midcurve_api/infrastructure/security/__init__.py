"""Security adapters."""

from midcurve_api.infrastructure.security.session_token_service import (
    SessionTokenService,
)

__all__ = ["SessionTokenService"]
