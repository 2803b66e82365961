"""Cross-protocol position handlers."""

from typing import Annotated, Any

from fastapi import Depends
from fastapi.responses import JSONResponse

from midcurve_api.core.container import get_logger, get_position_list_service
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ServiceErrorKind
from midcurve_api.domain.protocols import LoggerProtocol, PositionListServiceProtocol
from midcurve_api.domain.types import PositionQuery
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
)
from midcurve_api.presentation.routers.api.query_params import query_model
from midcurve_api.presentation.routers.api.v1.errors import ErrorRule, call_service
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.position_schemas import ListPositionsQuery

POSITION_LIST_RULES = (
    ErrorRule(
        code=ApiErrorCode.VALIDATION_ERROR,
        message="Unsupported protocol filter",
        kinds=frozenset({ServiceErrorKind.INVALID_INPUT}),
        substrings=("Unsupported protocol",),
    ),
)


async def list_positions(
    query: Annotated[ListPositionsQuery, Depends(query_model(ListPositionsQuery))],
    current_user: CurrentUser,
    position_list: PositionListServiceProtocol = Depends(get_position_list_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """List the user's positions across protocols.

    GET /api/v1/positions/list → 200 OK

    Args:
        query: protocols (comma-separated), status, sortBy, sortDirection,
            limit and offset.
        current_user: Authenticated principal.
        position_list: Cross-protocol listing service (injected).
        logger: Logger (injected).

    Returns:
        Paginated JSONResponse; meta.filters echoes the applied filters.
    """
    page = await call_service(
        position_list.list_positions(
            current_user.id,
            PositionQuery(
                status=query.status.value,
                protocols=tuple(query.protocols) if query.protocols else None,
                sort_by=query.sort_by.value,
                sort_direction=query.sort_direction.value,
                limit=query.limit,
                offset=query.offset,
            ),
        ),
        rules=POSITION_LIST_RULES,
        fallback_message="Failed to retrieve positions",
        operation="list_positions",
        logger=logger,
        user_id=current_user.id,
    )

    filters: dict[str, Any] = {
        "status": query.status.value,
        "sortBy": query.sort_by.value,
        "sortDirection": query.sort_direction.value,
    }
    if query.protocols:
        filters["protocols"] = list(query.protocols)
    return EnvelopeBuilder.paginated_response(
        page.positions,
        total=page.total,
        limit=query.limit,
        offset=query.offset,
        meta={"filters": filters},
    )
