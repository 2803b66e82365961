"""Uniswap V3 pool handlers.

Handlers:
    get_uniswapv3_pool - Pool with fresh on-chain state, optionally enriched
        with subgraph metrics

Metrics are fetched concurrently with pool discovery. Enrichment is best
effort: a metrics failure is logged and the ``metrics`` field is omitted.
A discovery failure cancels the pending metrics fetch.
"""

import asyncio
from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import Depends, Path
from fastapi.responses import JSONResponse

from midcurve_api.core.container import get_logger, get_pool_service, get_subgraph_client
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ServiceErrorKind
from midcurve_api.domain.protocols import (
    LoggerProtocol,
    SubgraphClientProtocol,
    UniswapV3PoolServiceProtocol,
)
from midcurve_api.domain.types import PoolMetrics
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
)
from midcurve_api.presentation.routers.api.query_params import query_model
from midcurve_api.presentation.routers.api.v1.errors import ErrorRule, call_service
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.common_schemas import ADDRESS_PATTERN
from midcurve_api.schemas.pool_schemas import GetUniswapV3PoolQuery


def _pool_rules(address: str, chain_id: int) -> tuple[ErrorRule, ...]:
    return (
        ErrorRule(
            code=ApiErrorCode.POOL_NOT_FOUND,
            message=f"Pool not found at address {address} on chain {chain_id}",
            kinds=frozenset({ServiceErrorKind.NOT_A_POOL, ServiceErrorKind.NOT_FOUND}),
            substrings=("Invalid pool address", "does not implement"),
            details=None,
        ),
        ErrorRule(
            code=ApiErrorCode.CHAIN_NOT_SUPPORTED,
            kinds=frozenset({ServiceErrorKind.CHAIN_NOT_SUPPORTED}),
            substrings=("not configured", "not supported"),
            details=None,
        ),
        ErrorRule(
            code=ApiErrorCode.BAD_GATEWAY,
            message="Failed to read pool data from blockchain",
            kinds=frozenset({ServiceErrorKind.ONCHAIN_READ_FAILED}),
            substrings=("Failed to read",),
        ),
    )


async def _fetch_metrics(
    subgraph: SubgraphClientProtocol,
    *,
    chain_id: int,
    address: str,
    logger: LoggerProtocol,
) -> PoolMetrics | None:
    try:
        return await subgraph.get_pool_metrics(chain_id, address)
    except Exception as error:
        logger.warning(
            "Pool metrics enrichment failed",
            chain_id=chain_id,
            address=address,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        return None


def _pool_field(pool: Any, *names: str) -> Any:
    """Read a nested attribute or key (pool.config.address), None when absent."""
    value = pool
    for name in names:
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(name)
        else:
            value = getattr(value, name, None)
    return value


async def get_uniswapv3_pool(
    address: Annotated[str, Path(pattern=ADDRESS_PATTERN, description="Pool contract address")],
    query: Annotated[GetUniswapV3PoolQuery, Depends(query_model(GetUniswapV3PoolQuery))],
    current_user: CurrentUser,
    pools: UniswapV3PoolServiceProtocol = Depends(get_pool_service),
    subgraph: SubgraphClientProtocol = Depends(get_subgraph_client),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Get a Uniswap V3 pool with fresh on-chain state.

    GET /api/v1/pools/uniswapv3/{address}?chainId=&enrichMetrics= → 200 OK

    Args:
        address: Pool contract address.
        query: chainId (required) and enrichMetrics ('true' to enable).
        current_user: Authenticated principal.
        pools: Pool service (injected).
        subgraph: Subgraph client (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with {"pool", "metrics"?}; meta carries poolId,
        address, chainId and hasMetrics.

    Raises:
        ApiError: POOL_NOT_FOUND, CHAIN_NOT_SUPPORTED, BAD_GATEWAY or
            INTERNAL_SERVER_ERROR.
    """
    chain_id = query.chain_id
    metrics_task: asyncio.Task[PoolMetrics | None] | None = None
    if query.enrich_metrics:
        metrics_task = asyncio.create_task(
            _fetch_metrics(subgraph, chain_id=chain_id, address=address, logger=logger)
        )

    try:
        pool = await call_service(
            pools.discover(pool_address=address, chain_id=chain_id),
            rules=_pool_rules(address, chain_id),
            fallback_message="An unexpected error occurred",
            operation="get_uniswapv3_pool",
            logger=logger,
            user_id=current_user.id,
            address=address,
            chain_id=chain_id,
        )
    except BaseException:
        if metrics_task is not None:
            metrics_task.cancel()
        raise

    metrics = await metrics_task if metrics_task is not None else None

    data: dict[str, Any] = {"pool": pool}
    if metrics is not None:
        data["metrics"] = {
            "tvlUSD": metrics.tvl_usd,
            "volumeUSD": metrics.volume_usd,
            "feesUSD": metrics.fees_usd,
        }

    return EnvelopeBuilder.success_response(
        data,
        meta={
            "poolId": _pool_field(pool, "id"),
            "address": _pool_field(pool, "config", "address") or address,
            "chainId": chain_id,
            "hasMetrics": metrics is not None,
        },
    )
