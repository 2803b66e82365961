"""Route generator for the API Route Registry.

register_routes_from_registry() converts RouteMetadata entries into FastAPI
routes at import time.

Auth is attached as a route-level dependency, so it is resolved before the
handler's own parameters: an unauthenticated request gets 401 even when its
query or path parameters are invalid.

Functions:
    register_routes_from_registry: Generate all routes from registry
    _build_dependencies: Build FastAPI dependencies from auth policy
    _build_responses: Build OpenAPI responses dict from error specs
"""

from typing import Any

from fastapi import APIRouter, Depends

from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    get_current_user,
    get_session_user,
)
from midcurve_api.presentation.routers.api.v1.routes.metadata import (
    AuthLevel,
    AuthPolicy,
    ErrorSpec,
    RouteMetadata,
)
from midcurve_api.schemas.common_schemas import ErrorEnvelope


def register_routes_from_registry(
    router: APIRouter,
    registry: list[RouteMetadata],
) -> None:
    """Generate FastAPI routes from registry metadata.

    Args:
        router: FastAPI APIRouter to register routes on
        registry: List of RouteMetadata entries to convert into routes

    Example:
        >>> v1_router = APIRouter(prefix="/v1")
        >>> register_routes_from_registry(v1_router, ROUTE_REGISTRY)
    """
    for metadata in registry:
        dependencies = _build_dependencies(metadata.auth_policy)
        responses = _build_responses(metadata.errors) if metadata.errors else None

        router.add_api_route(
            path=metadata.path,
            endpoint=metadata.handler,
            methods=[metadata.method.value],
            response_model=metadata.response_model,
            status_code=metadata.status_code,
            tags=list(metadata.tags),
            summary=metadata.summary,
            description=metadata.description,
            operation_id=metadata.operation_id,
            responses=responses,
            dependencies=dependencies,
            deprecated=metadata.deprecated,
        )


def _build_dependencies(auth_policy: AuthPolicy) -> list[Any]:
    """Build FastAPI dependencies from auth policy.

    Auth policy mapping:
        PUBLIC: No dependencies
        AUTHENTICATED: Depends(get_current_user) - API key or session
        SESSION: Depends(get_session_user) - session only

    FastAPI caches a dependency per request, so a handler that also takes
    CurrentUser/SessionUser reuses the principal resolved here.

    Args:
        auth_policy: Authentication policy from RouteMetadata

    Returns:
        List of FastAPI dependencies to inject

    Raises:
        ValueError: For an unknown auth level (fail closed).
    """
    match auth_policy.level:
        case AuthLevel.PUBLIC:
            return []

        case AuthLevel.AUTHENTICATED:
            return [Depends(get_current_user)]

        case AuthLevel.SESSION:
            return [Depends(get_session_user)]

        case _:
            msg = f"Unknown auth level: {auth_policy.level}"
            raise ValueError(msg)


def _build_responses(errors: list[ErrorSpec]) -> dict[int | str, dict[str, Any]]:
    """Build OpenAPI responses dict from error specifications.

    Example:
        >>> _build_responses([ErrorSpec(status=404, description="Pool not found")])
        {404: {"description": "Pool not found", "model": ErrorEnvelope}}
    """
    return {
        error.status: {
            "description": error.description,
            "model": error.model or ErrorEnvelope,
        }
        for error in errors
    }
