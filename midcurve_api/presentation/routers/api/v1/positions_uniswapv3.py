"""Uniswap V3 position handlers.

A position is addressed by (chainId, nftId) and always scoped to the
authenticated user: the lookup hash ``uniswapv3/{chainId}/{nftId}`` is
resolved within the user's own positions, so another user's position is
indistinguishable from a missing one.

Handlers:
    list_uniswapv3_positions  - Paginated list with chainId/status filters
    import_uniswapv3_position - Import an existing NFT position from chain
    create_uniswapv3_position - PUT: create from the first on-chain event
    update_uniswapv3_position - PATCH: append ledger events
    get_uniswapv3_position    - Position refreshed from chain
    delete_uniswapv3_position - Idempotent delete
    get_uniswapv3_position_ledger - Ledger events
    get_uniswapv3_position_apr    - APR periods
"""

from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import Depends, Path
from fastapi.responses import JSONResponse

from midcurve_api.core.container import get_logger, get_position_service
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError, ServiceErrorKind
from midcurve_api.domain.protocols import (
    LoggerProtocol,
    UniswapV3PositionServiceProtocol,
)
from midcurve_api.domain.types import PositionQuery
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
)
from midcurve_api.presentation.routers.api.query_params import query_model
from midcurve_api.presentation.routers.api.v1.errors import ErrorRule, call_service
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.common_schemas import PathInt
from midcurve_api.schemas.position_schemas import (
    CreateUniswapV3PositionRequest,
    ImportUniswapV3PositionRequest,
    ListUniswapV3PositionsQuery,
    UpdateUniswapV3PositionRequest,
)

ChainIdPath = Annotated[PathInt, Path(gt=0, description="EVM chain ID")]
NftIdPath = Annotated[PathInt, Path(gt=0, description="Position NFT token ID")]

CHAIN_RULE = ErrorRule(
    code=ApiErrorCode.CHAIN_NOT_SUPPORTED,
    message="Chain not supported",
    kinds=frozenset({ServiceErrorKind.CHAIN_NOT_SUPPORTED}),
    substrings=("not configured", "not supported"),
)

POSITION_NOT_FOUND_RULE = ErrorRule(
    code=ApiErrorCode.POSITION_NOT_FOUND,
    message="Position not found",
    kinds=frozenset({ServiceErrorKind.NOT_FOUND, ServiceErrorKind.NOT_OWNED}),
    substrings=("not found", "does not exist"),
)

ONCHAIN_READ_RULE = ErrorRule(
    code=ApiErrorCode.BAD_REQUEST,
    message="Failed to refresh position data from blockchain",
    kinds=frozenset({ServiceErrorKind.ONCHAIN_READ_FAILED}),
    substrings=("Failed to read", "contract", "RPC"),
)

POSITION_READ_RULES = (CHAIN_RULE, POSITION_NOT_FOUND_RULE, ONCHAIN_READ_RULE)

POSITION_CREATE_RULES = (
    CHAIN_RULE,
    ErrorRule(
        code=ApiErrorCode.CONFLICT,
        message="Position already exists",
        kinds=frozenset({ServiceErrorKind.ALREADY_EXISTS}),
        substrings=("already exists",),
    ),
    ErrorRule(
        code=ApiErrorCode.POOL_NOT_FOUND,
        message="Pool not found",
        kinds=frozenset({ServiceErrorKind.NOT_A_POOL}),
        substrings=("Invalid pool address", "Pool not found"),
    ),
    ErrorRule(
        code=ApiErrorCode.BAD_REQUEST,
        message="Invalid position data",
        kinds=frozenset({ServiceErrorKind.INVALID_INPUT}),
        substrings=("Invalid",),
    ),
    ONCHAIN_READ_RULE,
)

POSITION_UPDATE_RULES = (
    CHAIN_RULE,
    POSITION_NOT_FOUND_RULE,
    ErrorRule(
        code=ApiErrorCode.BAD_REQUEST,
        message="Events must be appended in blockchain order",
        kinds=frozenset({ServiceErrorKind.EVENT_ORDER}),
        substrings=("out of order", "must be after", "chronological"),
    ),
    ErrorRule(
        code=ApiErrorCode.BAD_REQUEST,
        message="Invalid ledger events",
        kinds=frozenset({ServiceErrorKind.INVALID_INPUT}),
        substrings=("Invalid",),
    ),
)

POSITION_IMPORT_RULES = (
    CHAIN_RULE,
    ErrorRule(
        code=ApiErrorCode.POSITION_NOT_FOUND,
        message="Position not found on chain",
        kinds=frozenset({ServiceErrorKind.NOT_FOUND}),
        substrings=("not found", "does not exist"),
    ),
    ErrorRule(
        code=ApiErrorCode.FORBIDDEN,
        message="Position is not owned by any of your wallets",
        kinds=frozenset({ServiceErrorKind.NOT_OWNED}),
        substrings=("not owned",),
    ),
    ErrorRule(
        code=ApiErrorCode.BAD_REQUEST,
        message="Failed to read position data from blockchain",
        kinds=frozenset({ServiceErrorKind.ONCHAIN_READ_FAILED}),
        substrings=("Failed to read", "contract", "RPC"),
    ),
)


def position_hash(chain_id: int, nft_id: int) -> str:
    """Lookup key of a Uniswap V3 position within a user's positions."""
    return f"uniswapv3/{chain_id}/{nft_id}"


def _position_id(position: Any) -> Any:
    if isinstance(position, Mapping):
        return position["id"]
    return position.id


async def _find_owned_position(
    positions: UniswapV3PositionServiceProtocol,
    *,
    user_id: str,
    chain_id: int,
    nft_id: int,
    logger: LoggerProtocol,
    fallback_message: str,
) -> Any:
    """Return the user's position or raise POSITION_NOT_FOUND."""
    position = await call_service(
        positions.find_by_position_hash(user_id, position_hash(chain_id, nft_id)),
        rules=POSITION_READ_RULES,
        fallback_message=fallback_message,
        operation="find_position",
        logger=logger,
        user_id=user_id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    if position is None:
        raise ApiError(
            ApiErrorCode.POSITION_NOT_FOUND,
            "Position not found",
            f"No Uniswap V3 position found for chainId {chain_id} and nftId {nft_id}",
        )
    return position


async def list_uniswapv3_positions(
    query: Annotated[
        ListUniswapV3PositionsQuery, Depends(query_model(ListUniswapV3PositionsQuery))
    ],
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """List the user's Uniswap V3 positions.

    GET /api/v1/positions/uniswapv3/list → 200 OK
    """
    page = await call_service(
        positions.find_many(
            current_user.id,
            PositionQuery(
                chain_id=query.chain_id,
                status=query.status.value,
                protocols=("uniswapv3",),
                limit=query.limit,
                offset=query.offset,
            ),
        ),
        rules=(CHAIN_RULE,),
        fallback_message="Failed to retrieve positions",
        operation="list_uniswapv3_positions",
        logger=logger,
        user_id=current_user.id,
    )

    filters: dict[str, Any] = {"status": query.status.value}
    if query.chain_id is not None:
        filters["chainId"] = query.chain_id
    return EnvelopeBuilder.paginated_response(
        page.positions,
        total=page.total,
        limit=query.limit,
        offset=query.offset,
        meta={"filters": filters},
    )


async def import_uniswapv3_position(
    body: ImportUniswapV3PositionRequest,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Import an existing position NFT from chain.

    POST /api/v1/positions/uniswapv3/import → 200 OK

    Args:
        body: chainId and nftId of the position.
        current_user: Authenticated principal.
        positions: Position service (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with the imported position.
    """
    position = await call_service(
        positions.import_position(current_user.id, body.chain_id, body.nft_id),
        rules=POSITION_IMPORT_RULES,
        fallback_message="Failed to import position",
        operation="import_uniswapv3_position",
        logger=logger,
        user_id=current_user.id,
        chain_id=body.chain_id,
        nft_id=body.nft_id,
    )
    logger.info(
        "Position imported",
        user_id=current_user.id,
        chain_id=body.chain_id,
        nft_id=body.nft_id,
    )
    return EnvelopeBuilder.success_response(position)


async def create_uniswapv3_position(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    body: CreateUniswapV3PositionRequest,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Create a position from its first INCREASE_LIQUIDITY event.

    PUT /api/v1/positions/uniswapv3/{chain_id}/{nft_id} → 200 OK

    Args:
        chain_id: Chain of the position.
        nft_id: Position NFT token ID.
        body: Pool, range, owner and the opening event.
        current_user: Authenticated principal.
        positions: Position service (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with the created position.

    Raises:
        ApiError: CHAIN_NOT_SUPPORTED, CONFLICT, POOL_NOT_FOUND,
            BAD_REQUEST or INTERNAL_SERVER_ERROR.
    """
    position = await call_service(
        positions.create_position(
            current_user.id, chain_id, nft_id, body.model_dump(exclude_none=True)
        ),
        rules=POSITION_CREATE_RULES,
        fallback_message="Failed to create position",
        operation="create_uniswapv3_position",
        logger=logger,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    logger.info(
        "Position created",
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    return EnvelopeBuilder.success_response(position)


async def update_uniswapv3_position(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    body: UpdateUniswapV3PositionRequest,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Append ledger events to a position.

    PATCH /api/v1/positions/uniswapv3/{chain_id}/{nft_id} → 200 OK

    Events must come after the last ledger event in blockchain order
    (blockNumber, transactionIndex, logIndex); the services layer rejects
    anything else.
    """
    position = await call_service(
        positions.append_events(
            current_user.id,
            chain_id,
            nft_id,
            [event.model_dump(exclude_none=True) for event in body.events],
        ),
        rules=POSITION_UPDATE_RULES,
        fallback_message="Failed to update position",
        operation="update_uniswapv3_position",
        logger=logger,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
        event_count=len(body.events),
    )
    return EnvelopeBuilder.success_response(position)


async def get_uniswapv3_position(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Get a position refreshed from chain.

    GET /api/v1/positions/uniswapv3/{chain_id}/{nft_id} → 200 OK
    """
    stored = await _find_owned_position(
        positions,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
        logger=logger,
        fallback_message="Failed to get position",
    )
    position = await call_service(
        positions.refresh(_position_id(stored)),
        rules=POSITION_READ_RULES,
        fallback_message="Failed to get position",
        operation="refresh_uniswapv3_position",
        logger=logger,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    return EnvelopeBuilder.success_response(position)


async def delete_uniswapv3_position(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Delete a position.

    DELETE /api/v1/positions/uniswapv3/{chain_id}/{nft_id} → 200 OK

    Deleting a position that does not exist (or is not the user's)
    succeeds with the same empty payload.
    """
    try:
        await call_service(
            positions.delete_by_position_hash(
                current_user.id, position_hash(chain_id, nft_id)
            ),
            rules=(CHAIN_RULE, POSITION_NOT_FOUND_RULE),
            fallback_message="Failed to delete position",
            operation="delete_uniswapv3_position",
            logger=logger,
            user_id=current_user.id,
            chain_id=chain_id,
            nft_id=nft_id,
        )
    except ApiError as error:
        if error.code is not ApiErrorCode.POSITION_NOT_FOUND:
            raise
    return EnvelopeBuilder.success_response({})


async def get_uniswapv3_position_ledger(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Ledger events of a position, oldest first.

    GET /api/v1/positions/uniswapv3/{chain_id}/{nft_id}/ledger → 200 OK
    """
    stored = await _find_owned_position(
        positions,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
        logger=logger,
        fallback_message="Failed to fetch position ledger",
    )
    events = await call_service(
        positions.get_ledger(_position_id(stored)),
        rules=POSITION_READ_RULES,
        fallback_message="Failed to fetch position ledger",
        operation="get_uniswapv3_position_ledger",
        logger=logger,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    events = list(events)
    return EnvelopeBuilder.success_response(events, meta={"count": len(events)})


async def get_uniswapv3_position_apr(
    chain_id: ChainIdPath,
    nft_id: NftIdPath,
    current_user: CurrentUser,
    positions: UniswapV3PositionServiceProtocol = Depends(get_position_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """APR periods of a position.

    GET /api/v1/positions/uniswapv3/{chain_id}/{nft_id}/apr → 200 OK
    """
    stored = await _find_owned_position(
        positions,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
        logger=logger,
        fallback_message="Failed to fetch APR periods",
    )
    periods = await call_service(
        positions.get_apr_periods(_position_id(stored)),
        rules=POSITION_READ_RULES,
        fallback_message="Failed to fetch APR periods",
        operation="get_uniswapv3_position_apr",
        logger=logger,
        user_id=current_user.id,
        chain_id=chain_id,
        nft_id=nft_id,
    )
    periods = list(periods)
    return EnvelopeBuilder.success_response(periods, meta={"count": len(periods)})
