"""Shared schemas: response envelopes and pagination.

Envelope models describe the three response shapes for OpenAPI. The
envelopes themselves are built by EnvelopeBuilder.

Reference:
    - presentation/routers/api/v1/responses/envelope_builder.py
"""

import re
from datetime import datetime
from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from midcurve_api.core.enums import ApiErrorCode

T = TypeVar("T")

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
TX_HASH_PATTERN = r"^(0x)?[0-9a-fA-F]{64}$"
UINT_STRING_PATTERN = r"^[0-9]+$"
ISO_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)

MIN_PAGE_LIMIT = 1
MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 20


def _require_integer_string(v: Any) -> Any:
    """Reject query and path strings such as "1.0" or "1e3" that lax int parsing accepts."""
    if isinstance(v, str) and not v.lstrip("-").isdigit():
        raise ValueError("Expected an integer")
    return v


QueryInt = Annotated[int, BeforeValidator(_require_integer_string)]
PathInt = Annotated[int, BeforeValidator(_require_integer_string)]


def _require_datetime_string(v: Any) -> Any:
    """Accept only ISO-8601 date-time strings with a time zone designator."""
    if not isinstance(v, str) or not ISO_DATETIME_RE.fullmatch(v):
        raise ValueError("Timestamp must be a valid ISO 8601 date string")
    return v


IsoDateTime = Annotated[datetime, BeforeValidator(_require_datetime_string)]


class CamelModel(BaseModel):
    """Base for request schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Envelopes
# =============================================================================


class ResponseMeta(BaseModel):
    """Response metadata. Always carries a timestamp; endpoints may add keys."""

    model_config = ConfigDict(extra="allow")

    timestamp: str = Field(..., description="ISO-8601 UTC build time of the response")


class ErrorBody(BaseModel):
    code: ApiErrorCode
    message: str
    details: Any | None = None


class SuccessEnvelope(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T
    meta: ResponseMeta


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    error: ErrorBody
    meta: ResponseMeta


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    limit: int
    offset: int
    has_more: bool = Field(..., alias="hasMore")


class PaginatedEnvelope(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: list[T]
    pagination: PaginationInfo
    meta: ResponseMeta


# =============================================================================
# Query schemas
# =============================================================================


class PaginationQuery(CamelModel):
    """Offset pagination. Query strings are coerced to integers."""

    limit: QueryInt = Field(
        default=DEFAULT_PAGE_LIMIT,
        ge=MIN_PAGE_LIMIT,
        le=MAX_PAGE_LIMIT,
        description="Results per page (1-100)",
    )
    offset: QueryInt = Field(default=0, ge=0, description="Number of results to skip")

