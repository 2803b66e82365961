"""Services-layer handles.

The services layer is constructed once per process, either passed to
``create_app(services=...)`` or loaded at startup from the
``SERVICES_FACTORY`` import path (``"package.module:callable"``, called
with the Settings instance). The bundle lives on ``app.state.services``
and is handed to handlers through the FastAPI dependencies below, so
tests can swap a single service with ``app.dependency_overrides``.
"""

from dataclasses import dataclass
from importlib import import_module

from fastapi import Depends, Request

from midcurve_api.core.config import Settings
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError
from midcurve_api.domain.protocols import (
    ApiKeyServiceProtocol,
    Erc20TokenServiceProtocol,
    NonceServiceProtocol,
    PositionListServiceProtocol,
    SiweVerifierProtocol,
    SubgraphClientProtocol,
    UniswapV3PoolServiceProtocol,
    UniswapV3PositionServiceProtocol,
    UserServiceProtocol,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ServiceHandles:
    """Process-wide service clients, constructed once."""

    api_keys: ApiKeyServiceProtocol
    users: UserServiceProtocol
    nonces: NonceServiceProtocol
    siwe: SiweVerifierProtocol
    tokens: Erc20TokenServiceProtocol
    pools: UniswapV3PoolServiceProtocol
    subgraph: SubgraphClientProtocol
    positions: UniswapV3PositionServiceProtocol
    position_list: PositionListServiceProtocol


def load_services(import_path: str, app_settings: Settings) -> ServiceHandles:
    """Import and call a services factory.

    Args:
        import_path: ``"module:callable"``.
        app_settings: Passed to the factory.

    Returns:
        ServiceHandles built by the factory.

    Raises:
        ValueError: If the import path is malformed.
        TypeError: If the factory returns something else than ServiceHandles.
    """
    module_name, _, attribute = import_path.partition(":")
    if not module_name or not attribute:
        raise ValueError(
            f"SERVICES_FACTORY must look like 'module:callable', got {import_path!r}"
        )
    factory = getattr(import_module(module_name), attribute)
    handles = factory(app_settings)
    if not isinstance(handles, ServiceHandles):
        raise TypeError(
            f"{import_path} returned {type(handles).__name__}, expected ServiceHandles"
        )
    return handles


def get_services(request: Request) -> ServiceHandles:
    """Return the service bundle attached to the running app.

    Raises:
        ApiError: SERVICE_UNAVAILABLE when no services are configured.
    """
    services: ServiceHandles | None = getattr(request.app.state, "services", None)
    if services is None:
        raise ApiError(
            ApiErrorCode.SERVICE_UNAVAILABLE,
            "Backend services are not configured",
        )
    return services


def get_api_key_service(
    services: ServiceHandles = Depends(get_services),
) -> ApiKeyServiceProtocol:
    return services.api_keys


def get_user_service(
    services: ServiceHandles = Depends(get_services),
) -> UserServiceProtocol:
    return services.users


def get_nonce_service(
    services: ServiceHandles = Depends(get_services),
) -> NonceServiceProtocol:
    return services.nonces


def get_siwe_verifier(
    services: ServiceHandles = Depends(get_services),
) -> SiweVerifierProtocol:
    return services.siwe


def get_erc20_token_service(
    services: ServiceHandles = Depends(get_services),
) -> Erc20TokenServiceProtocol:
    return services.tokens


def get_pool_service(
    services: ServiceHandles = Depends(get_services),
) -> UniswapV3PoolServiceProtocol:
    return services.pools


def get_subgraph_client(
    services: ServiceHandles = Depends(get_services),
) -> SubgraphClientProtocol:
    return services.subgraph


def get_position_service(
    services: ServiceHandles = Depends(get_services),
) -> UniswapV3PositionServiceProtocol:
    return services.positions


def get_position_list_service(
    services: ServiceHandles = Depends(get_services),
) -> PositionListServiceProtocol:
    return services.position_list
