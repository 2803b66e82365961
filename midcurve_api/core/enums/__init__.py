"""Core enumerations."""

from midcurve_api.core.enums.environment import Environment
from midcurve_api.core.enums.error_code import ERROR_CODE_TO_HTTP_STATUS, ApiErrorCode

__all__ = [
    "ApiErrorCode",
    "ERROR_CODE_TO_HTTP_STATUS",
    "Environment",
]
