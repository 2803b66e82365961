"""Global exception handlers for the FastAPI application.

Every error leaves the API in the same error envelope, whatever raised it.

Handlers:
    api_error_handler: ApiError -> its own code
    validation_exception_handler: RequestValidationError -> 400 VALIDATION_ERROR
    http_exception_handler: Starlette HTTPException (404 route, 405 method, ...)
    generic_exception_handler: anything else -> 500, logged, generic message

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from midcurve_api.core.container import get_logger
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder

# Transport status -> closest code in the closed set
_HTTP_STATUS_TO_CODE: dict[int, ApiErrorCode] = {
    400: ApiErrorCode.BAD_REQUEST,
    401: ApiErrorCode.UNAUTHORIZED,
    403: ApiErrorCode.FORBIDDEN,
    404: ApiErrorCode.NOT_FOUND,
    409: ApiErrorCode.CONFLICT,
    422: ApiErrorCode.UNPROCESSABLE_ENTITY,
    429: ApiErrorCode.TOO_MANY_REQUESTS,
    502: ApiErrorCode.BAD_GATEWAY,
    503: ApiErrorCode.SERVICE_UNAVAILABLE,
}

# Location prefixes FastAPI adds that callers never see as field names
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _code_for_status(status_code: int) -> ApiErrorCode:
    if status_code in _HTTP_STATUS_TO_CODE:
        return _HTTP_STATUS_TO_CODE[status_code]
    if status_code >= 500:
        return ApiErrorCode.INTERNAL_SERVER_ERROR
    return ApiErrorCode.BAD_REQUEST


def format_validation_errors(errors: Any) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe violations.

    Args:
        errors: Sequence of pydantic/FastAPI error dicts.

    Returns:
        List of {"path": [...], "message": str, "code": str}.
    """
    violations: list[dict[str, Any]] = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        violations.append(
            {
                "path": [part if isinstance(part, int) else str(part) for part in loc],
                "message": str(error.get("msg", "Invalid value")),
                "code": str(error.get("type", "validation_error")),
            }
        )
    return violations


def _validation_message(errors: Any) -> str:
    locations = {error.get("loc", ("",))[0] for error in errors if error.get("loc")}
    if locations == {"query"}:
        return "Invalid query parameters"
    if locations == {"path"}:
        return "Invalid path parameters"
    return "Invalid request data"


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ApiError)
    return EnvelopeBuilder.error_response(
        exc.code, exc.message, exc.details, headers=exc.headers
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert RequestValidationError into a 400 VALIDATION_ERROR envelope.

    Query, path and body violations all surface here, including bodies that
    are not valid JSON.

    Args:
        request: FastAPI Request object.
        exc: RequestValidationError from pydantic validation.

    Returns:
        JSONResponse with the violation list as `error.details`.
    """
    assert isinstance(exc, RequestValidationError)
    errors = exc.errors()
    get_logger().info(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        violation_count=len(errors),
    )
    return EnvelopeBuilder.error_response(
        ApiErrorCode.VALIDATION_ERROR,
        _validation_message(errors),
        format_validation_errors(errors),
    )


async def http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Render Starlette HTTPException (unknown route, wrong method) as an envelope."""
    assert isinstance(exc, StarletteHTTPException)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return EnvelopeBuilder.error_response(
        _code_for_status(exc.status_code),
        message,
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected Python exceptions.

    The exception is logged in full; the caller gets a generic message only.
    """
    get_logger().error(
        "Unhandled exception",
        error=exc,
        path=request.url.path,
        method=request.method,
    )
    return EnvelopeBuilder.error_response(
        ApiErrorCode.INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
