"""Error handling for the v1 API.

Exports:
    ErrorRule, call_service, classify_service_error: service error classification
    register_exception_handlers: global handlers rendering the error envelope
"""

from midcurve_api.presentation.routers.api.v1.errors.error_mapping import (
    ErrorRule,
    call_service,
    classify_service_error,
    error_message_details,
)
from midcurve_api.presentation.routers.api.v1.errors.exception_handlers import (
    format_validation_errors,
    register_exception_handlers,
)

__all__ = [
    "ErrorRule",
    "call_service",
    "classify_service_error",
    "error_message_details",
    "format_validation_errors",
    "register_exception_handlers",
]
