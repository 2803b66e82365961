"""Container module - Centralized dependency injection.

    from midcurve_api.core.container import get_logger, get_position_service

Organized into modules:
- infrastructure: logging, session token verification
- services: services-layer handles and their FastAPI dependencies
"""

from midcurve_api.core.container.infrastructure import (
    build_session_token_service,
    get_logger,
)
from midcurve_api.core.container.services import (
    ServiceHandles,
    get_api_key_service,
    get_erc20_token_service,
    get_nonce_service,
    get_pool_service,
    get_position_list_service,
    get_position_service,
    get_services,
    get_siwe_verifier,
    get_subgraph_client,
    get_user_service,
    load_services,
)

__all__ = [
    "ServiceHandles",
    "build_session_token_service",
    "get_api_key_service",
    "get_erc20_token_service",
    "get_logger",
    "get_nonce_service",
    "get_pool_service",
    "get_position_list_service",
    "get_position_service",
    "get_services",
    "get_siwe_verifier",
    "get_subgraph_client",
    "get_user_service",
    "load_services",
]
