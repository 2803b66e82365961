"""ERC-20 token handlers.

Handlers:
    discover_erc20_token  - Discover (or return the existing) token
    search_erc20_tokens   - Search tokens on one chain
"""

from typing import Annotated

from fastapi import Depends
from fastapi.responses import JSONResponse

from midcurve_api.core.container import get_erc20_token_service, get_logger
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ServiceErrorKind
from midcurve_api.domain.protocols import Erc20TokenServiceProtocol, LoggerProtocol
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
)
from midcurve_api.presentation.routers.api.query_params import query_model
from midcurve_api.presentation.routers.api.v1.errors import ErrorRule, call_service
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.token_schemas import (
    MAX_SEARCH_RESULTS,
    DiscoverErc20TokenRequest,
    SearchErc20TokensQuery,
)

TOKEN_DISCOVERY_RULES = (
    ErrorRule(
        code=ApiErrorCode.INVALID_ADDRESS,
        message="Invalid Ethereum address format",
        kinds=frozenset({ServiceErrorKind.INVALID_ADDRESS}),
        substrings=("Invalid Ethereum address",),
    ),
    ErrorRule(
        code=ApiErrorCode.CHAIN_NOT_SUPPORTED,
        message="Chain not supported",
        kinds=frozenset({ServiceErrorKind.CHAIN_NOT_SUPPORTED}),
        substrings=("not configured",),
    ),
    ErrorRule(
        code=ApiErrorCode.BAD_REQUEST,
        message="Contract does not implement ERC-20 interface",
        kinds=frozenset({ServiceErrorKind.NOT_ERC20}),
        substrings=("does not implement ERC-20", "Failed to read token metadata"),
    ),
    ErrorRule(
        code=ApiErrorCode.TOKEN_NOT_FOUND,
        message="Token not found on CoinGecko or enrichment failed",
        kinds=frozenset({ServiceErrorKind.ENRICHMENT_FAILED}),
        substrings=("CoinGecko", "enrichment"),
    ),
)

TOKEN_SEARCH_RULES = (
    ErrorRule(
        code=ApiErrorCode.VALIDATION_ERROR,
        message="At least one search parameter (symbol, name, or address) required",
        kinds=frozenset({ServiceErrorKind.INVALID_INPUT}),
        substrings=("at least one", "At least one"),
    ),
    ErrorRule(
        code=ApiErrorCode.CHAIN_NOT_SUPPORTED,
        message="Chain not supported",
        kinds=frozenset({ServiceErrorKind.CHAIN_NOT_SUPPORTED}),
        substrings=("not configured",),
    ),
)


async def discover_erc20_token(
    body: DiscoverErc20TokenRequest,
    current_user: CurrentUser,
    tokens: Erc20TokenServiceProtocol = Depends(get_erc20_token_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Discover an ERC-20 token.

    POST /api/v1/tokens/erc20 → 200 OK

    Idempotent: discovering an already-known token returns the stored one.

    Args:
        body: Token address and chain.
        current_user: Authenticated principal.
        tokens: Token service (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with the token.

    Raises:
        ApiError: INVALID_ADDRESS, CHAIN_NOT_SUPPORTED, BAD_REQUEST,
            TOKEN_NOT_FOUND or INTERNAL_SERVER_ERROR.
    """
    token = await call_service(
        tokens.discover(address=body.address, chain_id=body.chain_id),
        rules=TOKEN_DISCOVERY_RULES,
        fallback_message="Failed to discover token",
        operation="discover_erc20_token",
        logger=logger,
        user_id=current_user.id,
        address=body.address,
        chain_id=body.chain_id,
    )
    return EnvelopeBuilder.success_response(token)


async def search_erc20_tokens(
    query: Annotated[SearchErc20TokensQuery, Depends(query_model(SearchErc20TokensQuery))],
    current_user: CurrentUser,
    tokens: Erc20TokenServiceProtocol = Depends(get_erc20_token_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Search ERC-20 tokens.

    GET /api/v1/tokens/erc20/search → 200 OK

    At most MAX_SEARCH_RESULTS tokens are returned.
    """
    results = await call_service(
        tokens.search_tokens(
            chain_id=query.chain_id,
            symbol=query.symbol,
            name=query.name,
            address=query.address,
        ),
        rules=TOKEN_SEARCH_RULES,
        fallback_message="Failed to search tokens",
        operation="search_erc20_tokens",
        logger=logger,
        user_id=current_user.id,
        chain_id=query.chain_id,
    )
    found = list(results)[:MAX_SEARCH_RESULTS]
    return EnvelopeBuilder.success_response(
        found,
        meta={"count": len(found), "limit": MAX_SEARCH_RESULTS},
    )
