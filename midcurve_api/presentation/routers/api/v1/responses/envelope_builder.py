"""Response envelope builder.

Every response body has one of three shapes:

    success:   {"success": true,  "data": ..., "meta": {"timestamp": ..., ...}}
    error:     {"success": false, "error": {"code", "message", "details"?}, "meta": {"timestamp"}}
    paginated: {"success": true,  "data": [...], "pagination": {...}, "meta": {...}}

`meta.timestamp` is taken when the envelope is built, not when the request
arrived. `pagination.hasMore` is always derived here.

Exports:
    EnvelopeBuilder: Static constructors for envelopes and JSON responses
    utc_timestamp: Current time as ISO-8601 UTC with millisecond precision
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from fastapi.responses import JSONResponse

from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.presentation.routers.api.serializers import format_timestamp, serialize


def utc_timestamp() -> str:
    return format_timestamp(datetime.now(UTC))


class EnvelopeBuilder:
    """Build response envelopes.

    Data and meta are run through the serializer, so handlers may pass
    service values directly.

    Example:
        >>> EnvelopeBuilder.paginated([], total=0, limit=20, offset=0)["pagination"]
        {'total': 0, 'limit': 20, 'offset': 0, 'hasMore': False}
    """

    @staticmethod
    def success(data: Any, meta: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return {
            "success": True,
            "data": serialize(data),
            "meta": EnvelopeBuilder._meta(meta),
        }

    @staticmethod
    def error(
        code: ApiErrorCode, message: str, details: Any = None
    ) -> dict[str, Any]:
        """Build an error envelope.

        Args:
            code: Error code; the transport status is derived from it.
            message: Client-facing message.
            details: Optional details, omitted from the body when None.

        Returns:
            Error envelope dict.
        """
        error: dict[str, Any] = {"code": code.value, "message": message}
        if details is not None:
            error["details"] = serialize(details)
        return {
            "success": False,
            "error": error,
            "meta": {"timestamp": utc_timestamp()},
        }

    @staticmethod
    def paginated(
        items: Sequence[Any],
        *,
        total: int,
        limit: int,
        offset: int,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Build a paginated envelope.

        Args:
            items: The page of results.
            total: Total matching results across all pages.
            limit: Page size requested.
            offset: Offset requested.
            meta: Extra metadata (filters, ...).

        Returns:
            Paginated envelope dict. `hasMore` is false for an empty page.
        """
        return {
            "success": True,
            "data": serialize(list(items)),
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "hasMore": EnvelopeBuilder.has_more(
                    item_count=len(items), total=total, limit=limit, offset=offset
                ),
            },
            "meta": EnvelopeBuilder._meta(meta),
        }

    @staticmethod
    def has_more(*, item_count: int, total: int, limit: int, offset: int) -> bool:
        return item_count > 0 and offset + limit < total

    # -------------------------------------------------------------------------
    # JSONResponse helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def success_response(
        data: Any,
        *,
        meta: Mapping[str, Any] | None = None,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=EnvelopeBuilder.success(data, meta),
            headers=dict(headers) if headers else None,
        )

    @staticmethod
    def paginated_response(
        items: Sequence[Any],
        *,
        total: int,
        limit: int,
        offset: int,
        meta: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=200,
            content=EnvelopeBuilder.paginated(
                items, total=total, limit=limit, offset=offset, meta=meta
            ),
            headers=dict(headers) if headers else None,
        )

    @staticmethod
    def error_response(
        code: ApiErrorCode,
        message: str,
        details: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=code.http_status,
            content=EnvelopeBuilder.error(code, message, details),
            headers=dict(headers) if headers else None,
        )

    @staticmethod
    def _meta(meta: Mapping[str, Any] | None) -> dict[str, Any]:
        extra = serialize(dict(meta)) if meta else {}
        return {"timestamp": utc_timestamp(), **extra}
