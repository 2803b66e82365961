"""API error codes and their HTTP status bindings.

Every code in ApiErrorCode has exactly one entry in ERROR_CODE_TO_HTTP_STATUS.
The table is part of the public contract: clients branch on `error.code`
and the transport status must never drift from it.
"""

from enum import Enum


class ApiErrorCode(str, Enum):
    """Closed set of error codes returned in the error envelope."""

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    CHAIN_NOT_SUPPORTED = "CHAIN_NOT_SUPPORTED"

    # 401
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_SIWE_MESSAGE = "INVALID_SIWE_MESSAGE"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    NONCE_INVALID = "NONCE_INVALID"

    # 403
    FORBIDDEN = "FORBIDDEN"

    # 404
    NOT_FOUND = "NOT_FOUND"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    POOL_NOT_FOUND = "POOL_NOT_FOUND"
    POSITION_NOT_FOUND = "POSITION_NOT_FOUND"
    API_KEY_NOT_FOUND = "API_KEY_NOT_FOUND"

    # 409
    WALLET_ALREADY_REGISTERED = "WALLET_ALREADY_REGISTERED"
    CONFLICT = "CONFLICT"

    # 422 / 429
    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

    # 5xx
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    @property
    def http_status(self) -> int:
        """HTTP status bound to this code."""
        return ERROR_CODE_TO_HTTP_STATUS[self]


ERROR_CODE_TO_HTTP_STATUS: dict[ApiErrorCode, int] = {
    ApiErrorCode.VALIDATION_ERROR: 400,
    ApiErrorCode.BAD_REQUEST: 400,
    ApiErrorCode.INVALID_ADDRESS: 400,
    ApiErrorCode.CHAIN_NOT_SUPPORTED: 400,
    ApiErrorCode.UNAUTHORIZED: 401,
    ApiErrorCode.INVALID_SIWE_MESSAGE: 401,
    ApiErrorCode.INVALID_SIGNATURE: 401,
    ApiErrorCode.NONCE_INVALID: 401,
    ApiErrorCode.FORBIDDEN: 403,
    ApiErrorCode.NOT_FOUND: 404,
    ApiErrorCode.TOKEN_NOT_FOUND: 404,
    ApiErrorCode.POOL_NOT_FOUND: 404,
    ApiErrorCode.POSITION_NOT_FOUND: 404,
    ApiErrorCode.API_KEY_NOT_FOUND: 404,
    ApiErrorCode.WALLET_ALREADY_REGISTERED: 409,
    ApiErrorCode.CONFLICT: 409,
    ApiErrorCode.UNPROCESSABLE_ENTITY: 422,
    ApiErrorCode.TOO_MANY_REQUESTS: 429,
    ApiErrorCode.INTERNAL_SERVER_ERROR: 500,
    ApiErrorCode.BAD_GATEWAY: 502,
    ApiErrorCode.SERVICE_UNAVAILABLE: 503,
}
