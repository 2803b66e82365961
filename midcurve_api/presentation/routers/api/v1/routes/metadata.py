"""Route metadata types for the API Route Registry.

The registry is the single source of truth for all v1 routes: it generates
the FastAPI routes, their auth dependencies and their OpenAPI metadata.

Core types:
    RouteMetadata: Complete route specification (method, path, handler, auth, docs)
    HTTPMethod: HTTP method enum (GET, POST, PATCH, PUT, DELETE)
    AuthPolicy / AuthLevel: Who may call the route
    ErrorSpec: Error response specification for OpenAPI
    IdempotencyLevel: HTTP idempotency classification

Usage:
    from midcurve_api.presentation.routers.api.v1.routes.metadata import (
        RouteMetadata, HTTPMethod,
    )

    metadata = RouteMetadata(
        method=HTTPMethod.POST,
        path="/tokens/erc20",
        handler=discover_erc20_token,
        resource="tokens",
        tags=["Tokens"],
        summary="Discover ERC-20 token",
        operation_id="discover_erc20_token",
        idempotency=IdempotencyLevel.IDEMPOTENT,
        auth_policy=AuthPolicy(level=AuthLevel.AUTHENTICATED),
    )
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel


# =============================================================================
# HTTP Method Enum
# =============================================================================


class HTTPMethod(str, Enum):
    """HTTP methods for API routes."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


# =============================================================================
# Authentication Policy
# =============================================================================


class AuthLevel(str, Enum):
    """Authentication levels for routes.

    Attributes:
        PUBLIC: No authentication (health, nonce)
        AUTHENTICATED: API key or session
        SESSION: Session only; API keys are rejected (key management, wallet linking)
    """

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    SESSION = "session"


@dataclass(frozen=True, kw_only=True)
class AuthPolicy:
    """Authentication policy for a route.

    Attributes:
        level: Authentication level.
        rationale: Optional explanation, expected for SESSION routes.

    Examples:
        >>> AuthPolicy(level=AuthLevel.PUBLIC)
        >>> AuthPolicy(
        ...     level=AuthLevel.SESSION,
        ...     rationale="API keys must not mint API keys",
        ... )
    """

    level: AuthLevel
    rationale: str | None = None


# =============================================================================
# Idempotency Level
# =============================================================================


class IdempotencyLevel(str, Enum):
    """HTTP idempotency classification.

    Attributes:
        SAFE: No side effects (GET)
        IDEMPOTENT: Side effects, but repeatable (PUT, DELETE, token discovery)
        NON_IDEMPOTENT: Side effects, not repeatable (POST, PATCH)
    """

    SAFE = "safe"
    IDEMPOTENT = "idempotent"
    NON_IDEMPOTENT = "non_idempotent"


# =============================================================================
# Error Specification
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class ErrorSpec:
    """Error response specification for OpenAPI documentation.

    Attributes:
        status: HTTP status code (e.g., 400, 404, 500)
        description: Human-readable error description
        model: Optional Pydantic model for the body (defaults to ErrorEnvelope)
    """

    status: int
    description: str
    model: type[BaseModel] | None = None


# =============================================================================
# Route Metadata (SSOT)
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class RouteMetadata:
    """Complete specification for an API route.

    Identity fields:
        method: HTTP method
        path: Path relative to the v1 router (e.g., "/tokens/erc20")
        handler: Async function implementing the endpoint

    Grouping fields:
        resource: Resource category (e.g., "positions")
        tags: OpenAPI tags

    OpenAPI documentation:
        summary, description, operation_id

    Request/Response:
        response_model: Optional Pydantic model for the success body
        status_code: Success status
        errors: Possible error responses for OpenAPI

    Behavior:
        idempotency: HTTP idempotency level
        auth_policy: Authentication policy
    """

    # Identity
    method: HTTPMethod
    path: str
    handler: Callable[..., Awaitable[Any]]

    # Grouping
    resource: str
    tags: Sequence[str]

    # OpenAPI documentation
    summary: str
    description: str | None = None
    operation_id: str | None = None

    # Request/Response
    response_model: type[BaseModel] | None = None
    status_code: int = 200
    errors: list[ErrorSpec] | None = None

    # Behavior
    idempotency: IdempotencyLevel
    auth_policy: AuthPolicy

    # Deprecation
    deprecated: bool = False
