"""API key management handlers.

Session authentication only: an API key can never list, mint or revoke
API keys.

Handlers:
    list_api_keys   - List the user's keys (metadata only)
    create_api_key  - Create a key; the full key is returned once
    revoke_api_key  - Revoke one of the user's keys
"""

from typing import Annotated

from fastapi import Depends, Path, status
from fastapi.responses import JSONResponse

from midcurve_api.core.container import get_api_key_service, get_logger
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ServiceErrorKind
from midcurve_api.domain.protocols import ApiKeyServiceProtocol, LoggerProtocol
from midcurve_api.domain.types import ApiKeyRecord
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    SessionUser,
)
from midcurve_api.presentation.routers.api.v1.errors import ErrorRule, call_service
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.auth_schemas import CreateApiKeyRequest

NEW_KEY_WARNING = "Save this key securely. It will not be shown again."


def _api_key_summary(record: ApiKeyRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "name": record.name,
        "keyPrefix": record.key_prefix,
        "lastUsed": record.last_used,
        "createdAt": record.created_at,
        "updatedAt": record.updated_at,
    }


async def list_api_keys(
    session_user: SessionUser,
    api_keys: ApiKeyServiceProtocol = Depends(get_api_key_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """List API keys of the signed-in user.

    GET /api/v1/user/api-keys → 200 OK
    """
    records = await call_service(
        api_keys.get_user_api_keys(session_user.id),
        rules=(),
        fallback_message="Failed to fetch API keys",
        operation="list_api_keys",
        logger=logger,
        user_id=session_user.id,
    )
    return EnvelopeBuilder.success_response(
        [_api_key_summary(record) for record in records],
        headers={"Cache-Control": "private, no-cache"},
    )


async def create_api_key(
    body: CreateApiKeyRequest,
    session_user: SessionUser,
    api_keys: ApiKeyServiceProtocol = Depends(get_api_key_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Create an API key.

    POST /api/v1/user/api-keys → 201 Created

    The response is the only place the full key ever appears; it is not
    cacheable.

    Args:
        body: Key name.
        session_user: Principal resolved from the session.
        api_keys: API key service (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with id, name, key, keyPrefix and createdAt.
    """
    created = await call_service(
        api_keys.create_api_key(session_user.id, body.name),
        rules=(),
        fallback_message="Failed to create API key",
        operation="create_api_key",
        logger=logger,
        user_id=session_user.id,
    )
    logger.info(
        "API key created",
        user_id=session_user.id,
        key_id=created.api_key.id,
        key_prefix=created.api_key.key_prefix,
    )
    return EnvelopeBuilder.success_response(
        {
            "id": created.api_key.id,
            "name": created.api_key.name,
            "key": created.key,
            "keyPrefix": created.api_key.key_prefix,
            "createdAt": created.api_key.created_at,
        },
        meta={"warning": NEW_KEY_WARNING},
        status_code=status.HTTP_201_CREATED,
        headers={"Cache-Control": "no-store"},
    )


async def revoke_api_key(
    key_id: Annotated[str, Path(min_length=1, description="API key ID")],
    session_user: SessionUser,
    api_keys: ApiKeyServiceProtocol = Depends(get_api_key_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Revoke an API key.

    DELETE /api/v1/user/api-keys/{key_id} → 200 OK

    A key that does not exist and a key owned by someone else are
    indistinguishable to the caller.
    """
    await call_service(
        api_keys.revoke_api_key(session_user.id, key_id),
        rules=(
            ErrorRule(
                code=ApiErrorCode.API_KEY_NOT_FOUND,
                message="API key not found",
                kinds=frozenset({ServiceErrorKind.NOT_FOUND, ServiceErrorKind.NOT_OWNED}),
                substrings=("not found", "does not belong"),
                details=lambda _: {"keyId": key_id},
            ),
        ),
        fallback_message="Failed to revoke API key",
        operation="revoke_api_key",
        logger=logger,
        user_id=session_user.id,
        key_id=key_id,
    )
    logger.info("API key revoked", user_id=session_user.id, key_id=key_id)
    return EnvelopeBuilder.success_response({"message": "API key revoked successfully"})
