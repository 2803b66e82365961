"""API v1 routers.

All routes are generated from the Route Metadata Registry at import time.
See routes/registry.py for the complete route catalog.

Resources (under {API_PREFIX}, "/api" by default):
    /v1/auth                 - SIWE nonce and wallet linking
    /v1/user/api-keys        - API key management (session only)
    /v1/tokens/erc20         - ERC-20 discovery and search
    /v1/pools/uniswapv3      - Uniswap V3 pools
    /v1/positions/uniswapv3  - Uniswap V3 position lifecycle
    /v1/positions/list       - Positions across protocols
"""

from fastapi import APIRouter

from midcurve_api.presentation.routers.api.v1.routes.generator import (
    register_routes_from_registry,
)
from midcurve_api.presentation.routers.api.v1.routes.registry import ROUTE_REGISTRY

v1_router = APIRouter(prefix="/v1")
register_routes_from_registry(v1_router, ROUTE_REGISTRY)

__all__ = [
    "v1_router",
]
