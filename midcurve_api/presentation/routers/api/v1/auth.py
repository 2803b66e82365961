"""Authentication resource handlers.

Handlers:
    get_nonce    - Issue a one-time SIWE nonce (public)
    link_wallet  - Verify a SIWE signature and bind the wallet (session only)

Routes are registered via ROUTE_REGISTRY in routes/registry.py.
"""

from fastapi import Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from midcurve_api.core.container import (
    get_logger,
    get_nonce_service,
    get_siwe_verifier,
    get_user_service,
)
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError, ServiceErrorKind
from midcurve_api.domain.protocols import (
    LoggerProtocol,
    NonceServiceProtocol,
    SiweVerifierProtocol,
    UserServiceProtocol,
)
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    SessionUser,
)
from midcurve_api.presentation.routers.api.v1.errors import (
    ErrorRule,
    call_service,
    format_validation_errors,
)
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder
from midcurve_api.schemas.auth_schemas import LinkWalletRequest, SiweMessage

NO_STORE_HEADERS = {"Cache-Control": "no-store, must-revalidate"}


async def get_nonce(
    nonces: NonceServiceProtocol = Depends(get_nonce_service),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Issue a SIWE nonce.

    GET /api/v1/auth/nonce → 200 OK

    Returns:
        JSONResponse with {"nonce": str}; never cached.
    """
    nonce = await call_service(
        nonces.generate_nonce(),
        rules=(),
        fallback_message="Failed to generate nonce",
        operation="generate_nonce",
        logger=logger,
    )
    return EnvelopeBuilder.success_response({"nonce": nonce}, headers=NO_STORE_HEADERS)


async def link_wallet(
    body: LinkWalletRequest,
    session_user: SessionUser,
    users: UserServiceProtocol = Depends(get_user_service),
    nonces: NonceServiceProtocol = Depends(get_nonce_service),
    siwe: SiweVerifierProtocol = Depends(get_siwe_verifier),
    logger: LoggerProtocol = Depends(get_logger),
) -> JSONResponse:
    """Link an additional wallet to the signed-in user.

    POST /api/v1/auth/link-wallet → 200 OK

    Steps: parse the SIWE message, verify the signature, check and consume
    the nonce, then bind the wallet.

    Args:
        body: SIWE message (JSON string) and signature.
        session_user: Principal resolved from the session.
        users: User service (injected).
        nonces: Nonce service (injected).
        siwe: SIWE verifier (injected).
        logger: Logger (injected).

    Returns:
        JSONResponse with the new wallet.

    Raises:
        ApiError: INVALID_SIWE_MESSAGE, INVALID_SIGNATURE, NONCE_INVALID,
            WALLET_ALREADY_REGISTERED or INTERNAL_SERVER_ERROR.
    """
    try:
        message = SiweMessage.model_validate_json(body.message)
    except ValidationError as exc:
        raise ApiError(
            ApiErrorCode.INVALID_SIWE_MESSAGE,
            "Failed to parse SIWE message",
            format_validation_errors(exc.errors(include_url=False)),
        ) from exc

    verified = await call_service(
        siwe.verify(message, body.signature),
        rules=(),
        fallback_message="Failed to link wallet",
        operation="verify_siwe_signature",
        logger=logger,
    )
    if not verified:
        raise ApiError(ApiErrorCode.INVALID_SIGNATURE, "Invalid SIWE signature")

    nonce_valid = await call_service(
        nonces.validate_nonce(message.nonce),
        rules=(),
        fallback_message="Failed to link wallet",
        operation="validate_nonce",
        logger=logger,
    )
    if not nonce_valid:
        raise ApiError(ApiErrorCode.NONCE_INVALID, "Invalid or expired nonce")

    await call_service(
        nonces.consume_nonce(message.nonce),
        rules=(),
        fallback_message="Failed to link wallet",
        operation="consume_nonce",
        logger=logger,
    )

    wallet = await call_service(
        users.link_wallet(session_user.id, message.address, message.chain_id),
        rules=(
            ErrorRule(
                code=ApiErrorCode.WALLET_ALREADY_REGISTERED,
                message="This wallet is already registered to a user account",
                kinds=frozenset({ServiceErrorKind.ALREADY_EXISTS}),
                substrings=("already registered",),
                details=lambda _: {"address": message.address, "chainId": message.chain_id},
            ),
        ),
        fallback_message="Failed to link wallet",
        operation="link_wallet",
        logger=logger,
        user_id=session_user.id,
        chain_id=message.chain_id,
    )

    logger.info(
        "Wallet linked",
        user_id=session_user.id,
        wallet_id=wallet.id,
        chain_id=wallet.chain_id,
    )
    return EnvelopeBuilder.success_response(
        {
            "id": wallet.id,
            "address": wallet.address,
            "chainId": wallet.chain_id,
            "isPrimary": wallet.is_primary,
            "createdAt": wallet.created_at,
        }
    )
