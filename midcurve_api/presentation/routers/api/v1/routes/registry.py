"""API Route Registry - Single Source of Truth for all v1 routes.

Registry structure:
    - Each entry is a RouteMetadata instance with complete specification
    - Handlers reference actual functions from router modules
    - Auth policies explicitly declared (PUBLIC, AUTHENTICATED, SESSION)
    - Paths are relative to the v1 router (mounted at {API_PREFIX}/v1)

Usage:
    router = APIRouter(prefix="/v1")
    register_routes_from_registry(router, ROUTE_REGISTRY)
"""

from typing import Any

from midcurve_api.presentation.routers.api.v1.api_keys import (
    create_api_key,
    list_api_keys,
    revoke_api_key,
)
from midcurve_api.presentation.routers.api.v1.auth import get_nonce, link_wallet
from midcurve_api.presentation.routers.api.v1.pools import get_uniswapv3_pool
from midcurve_api.presentation.routers.api.v1.positions import list_positions
from midcurve_api.presentation.routers.api.v1.positions_uniswapv3 import (
    create_uniswapv3_position,
    delete_uniswapv3_position,
    get_uniswapv3_position,
    get_uniswapv3_position_apr,
    get_uniswapv3_position_ledger,
    import_uniswapv3_position,
    list_uniswapv3_positions,
    update_uniswapv3_position,
)
from midcurve_api.presentation.routers.api.v1.routes.metadata import (
    AuthLevel,
    AuthPolicy,
    ErrorSpec,
    HTTPMethod,
    IdempotencyLevel,
    RouteMetadata,
)
from midcurve_api.presentation.routers.api.v1.tokens import (
    discover_erc20_token,
    search_erc20_tokens,
)
from midcurve_api.schemas.common_schemas import PaginatedEnvelope, SuccessEnvelope

AUTHENTICATED = AuthPolicy(level=AuthLevel.AUTHENTICATED)

UNAUTHORIZED = ErrorSpec(status=401, description="Authentication required")
VALIDATION = ErrorSpec(status=400, description="Validation error")
INTERNAL = ErrorSpec(status=500, description="Unexpected failure")
UNAVAILABLE = ErrorSpec(status=503, description="Backend services are not configured")
POSITION_MISSING = ErrorSpec(status=404, description="Position not found")

Envelope = SuccessEnvelope[Any]
Page = PaginatedEnvelope[Any]

# =============================================================================
# ROUTE_REGISTRY - Single Source of Truth
# =============================================================================

ROUTE_REGISTRY: list[RouteMetadata] = [
    # =========================================================================
    # Auth Resource (2 endpoints)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/auth/nonce",
        handler=get_nonce,
        resource="auth",
        tags=["Auth"],
        summary="Issue SIWE nonce",
        description="Issue a one-time nonce for a Sign-In-With-Ethereum message.",
        operation_id="get_auth_nonce",
        response_model=Envelope,
        errors=[INTERNAL, UNAVAILABLE],
        idempotency=IdempotencyLevel.NON_IDEMPOTENT,
        auth_policy=AuthPolicy(level=AuthLevel.PUBLIC),
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/auth/link-wallet",
        handler=link_wallet,
        resource="auth",
        tags=["Auth"],
        summary="Link wallet",
        description="Verify a SIWE signature and link the wallet to the signed-in user.",
        operation_id="link_wallet",
        response_model=Envelope,
        errors=[
            VALIDATION,
            UNAUTHORIZED,
            ErrorSpec(status=409, description="Wallet already registered"),
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.NON_IDEMPOTENT,
        auth_policy=AuthPolicy(
            level=AuthLevel.SESSION,
            rationale="Wallet linking requires an interactive session",
        ),
    ),
    # =========================================================================
    # API Keys Resource (3 endpoints)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/user/api-keys",
        handler=list_api_keys,
        resource="api_keys",
        tags=["API Keys"],
        summary="List API keys",
        operation_id="list_api_keys",
        response_model=Envelope,
        errors=[UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AuthPolicy(
            level=AuthLevel.SESSION,
            rationale="API keys cannot manage API keys",
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/user/api-keys",
        handler=create_api_key,
        resource="api_keys",
        tags=["API Keys"],
        summary="Create API key",
        description="Create an API key. The full key is only returned in this response.",
        operation_id="create_api_key",
        response_model=Envelope,
        status_code=201,
        errors=[VALIDATION, UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.NON_IDEMPOTENT,
        auth_policy=AuthPolicy(
            level=AuthLevel.SESSION,
            rationale="API keys cannot manage API keys",
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.DELETE,
        path="/user/api-keys/{key_id}",
        handler=revoke_api_key,
        resource="api_keys",
        tags=["API Keys"],
        summary="Revoke API key",
        operation_id="revoke_api_key",
        response_model=Envelope,
        errors=[
            UNAUTHORIZED,
            ErrorSpec(status=404, description="API key not found"),
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.IDEMPOTENT,
        auth_policy=AuthPolicy(
            level=AuthLevel.SESSION,
            rationale="API keys cannot manage API keys",
        ),
    ),
    # =========================================================================
    # Tokens Resource (2 endpoints)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/tokens/erc20",
        handler=discover_erc20_token,
        resource="tokens",
        tags=["Tokens"],
        summary="Discover ERC-20 token",
        description="Read token metadata from chain, enrich it and store it. "
        "Returns the stored token when it is already known.",
        operation_id="discover_erc20_token",
        response_model=Envelope,
        errors=[
            VALIDATION,
            UNAUTHORIZED,
            ErrorSpec(status=404, description="Token not found on CoinGecko"),
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.IDEMPOTENT,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/tokens/erc20/search",
        handler=search_erc20_tokens,
        resource="tokens",
        tags=["Tokens"],
        summary="Search ERC-20 tokens",
        description="Search by symbol, name or address on one chain (max 10 results).",
        operation_id="search_erc20_tokens",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    # =========================================================================
    # Pools Resource (1 endpoint)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/pools/uniswapv3/{address}",
        handler=get_uniswapv3_pool,
        resource="pools",
        tags=["Pools"],
        summary="Get Uniswap V3 pool",
        description="Pool with fresh on-chain state. With enrichMetrics=true, "
        "subgraph TVL, volume and fees are added when available.",
        operation_id="get_uniswapv3_pool",
        response_model=Envelope,
        errors=[
            VALIDATION,
            UNAUTHORIZED,
            ErrorSpec(status=404, description="Pool not found"),
            ErrorSpec(status=502, description="Failed to read pool data from blockchain"),
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    # =========================================================================
    # Uniswap V3 Positions Resource (8 endpoints)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/positions/uniswapv3/list",
        handler=list_uniswapv3_positions,
        resource="positions",
        tags=["Positions"],
        summary="List Uniswap V3 positions",
        operation_id="list_uniswapv3_positions",
        response_model=Page,
        errors=[VALIDATION, UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/positions/uniswapv3/import",
        handler=import_uniswapv3_position,
        resource="positions",
        tags=["Positions"],
        summary="Import Uniswap V3 position",
        description="Import a position NFT and its history from chain.",
        operation_id="import_uniswapv3_position",
        response_model=Envelope,
        errors=[
            VALIDATION,
            UNAUTHORIZED,
            ErrorSpec(status=403, description="Position not owned by the user"),
            POSITION_MISSING,
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.NON_IDEMPOTENT,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.PUT,
        path="/positions/uniswapv3/{chain_id}/{nft_id}",
        handler=create_uniswapv3_position,
        resource="positions",
        tags=["Positions"],
        summary="Create Uniswap V3 position",
        description="Create a position from its first INCREASE_LIQUIDITY event.",
        operation_id="create_uniswapv3_position",
        response_model=Envelope,
        errors=[
            VALIDATION,
            UNAUTHORIZED,
            ErrorSpec(status=404, description="Pool not found"),
            ErrorSpec(status=409, description="Position already exists"),
            INTERNAL,
        ],
        idempotency=IdempotencyLevel.IDEMPOTENT,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.PATCH,
        path="/positions/uniswapv3/{chain_id}/{nft_id}",
        handler=update_uniswapv3_position,
        resource="positions",
        tags=["Positions"],
        summary="Append ledger events",
        description="Append 1-100 ledger events. Events must follow the last "
        "recorded event in blockchain order.",
        operation_id="update_uniswapv3_position",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, POSITION_MISSING, INTERNAL],
        idempotency=IdempotencyLevel.NON_IDEMPOTENT,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/positions/uniswapv3/{chain_id}/{nft_id}",
        handler=get_uniswapv3_position,
        resource="positions",
        tags=["Positions"],
        summary="Get Uniswap V3 position",
        description="Position refreshed with current on-chain state.",
        operation_id="get_uniswapv3_position",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, POSITION_MISSING, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.DELETE,
        path="/positions/uniswapv3/{chain_id}/{nft_id}",
        handler=delete_uniswapv3_position,
        resource="positions",
        tags=["Positions"],
        summary="Delete Uniswap V3 position",
        description="Idempotent: deleting a missing position succeeds.",
        operation_id="delete_uniswapv3_position",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.IDEMPOTENT,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/positions/uniswapv3/{chain_id}/{nft_id}/ledger",
        handler=get_uniswapv3_position_ledger,
        resource="positions",
        tags=["Positions"],
        summary="Get position ledger",
        operation_id="get_uniswapv3_position_ledger",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, POSITION_MISSING, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/positions/uniswapv3/{chain_id}/{nft_id}/apr",
        handler=get_uniswapv3_position_apr,
        resource="positions",
        tags=["Positions"],
        summary="Get position APR periods",
        operation_id="get_uniswapv3_position_apr",
        response_model=Envelope,
        errors=[VALIDATION, UNAUTHORIZED, POSITION_MISSING, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
    # =========================================================================
    # Positions Resource, all protocols (1 endpoint)
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/positions/list",
        handler=list_positions,
        resource="positions",
        tags=["Positions"],
        summary="List positions",
        description="Positions across all protocols with filtering and sorting.",
        operation_id="list_positions",
        response_model=Page,
        errors=[VALIDATION, UNAUTHORIZED, INTERNAL],
        idempotency=IdempotencyLevel.SAFE,
        auth_policy=AUTHENTICATED,
    ),
]
