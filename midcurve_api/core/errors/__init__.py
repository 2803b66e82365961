"""Error types shared across layers."""

from midcurve_api.core.errors.api_error import ApiError
from midcurve_api.core.errors.service_error import ServiceError, ServiceErrorKind

__all__ = [
    "ApiError",
    "ServiceError",
    "ServiceErrorKind",
]
