"""API middleware and auth dependencies."""

from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
    SessionUser,
    get_current_user,
    get_session_user,
)
from midcurve_api.presentation.routers.api.middleware.trace_middleware import (
    TraceMiddleware,
    get_trace_id,
)

__all__ = [
    "CurrentUser",
    "SessionUser",
    "TraceMiddleware",
    "get_current_user",
    "get_session_user",
    "get_trace_id",
]
