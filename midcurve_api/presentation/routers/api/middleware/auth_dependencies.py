"""Authentication strategies and FastAPI dependencies.

A request is authenticated by trying an ordered list of strategies; the
first one that produces a principal wins. When none does, the request is
rejected with 401 UNAUTHORIZED before the handler runs.

Strategies:
    ApiKeyStrategy: ``Authorization: Bearer <key>`` where the key carries the
        API-key prefix (``mc_`` by default). Validated by the services layer.
        The key's last-used timestamp is updated in a detached task whose
        failure is logged and never reaches the caller.
    SessionStrategy: signed session JWT from the session cookie, or from a
        Bearer token that is not an API key.

Two authenticators are built per app:
    authenticator: API key, then session (most endpoints)
    session_authenticator: session only (API-key management, wallet linking),
        so an API key can never mint or revoke API keys

Usage:
    @router.get("/positions")
    async def list_positions(current_user: CurrentUser): ...

    @router.post("/user/api-keys")
    async def create_api_key(session_user: SessionUser): ...
"""

import asyncio
from collections.abc import Sequence
from functools import partial
from typing import Annotated, Protocol

from fastapi import Depends, Request

from midcurve_api.core.config import Settings
from midcurve_api.core.container.infrastructure import build_session_token_service
from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError
from midcurve_api.core.result import Failure, Result, Success
from midcurve_api.domain.protocols import ApiKeyServiceProtocol, LoggerProtocol
from midcurve_api.domain.types import AuthenticatedUser
from midcurve_api.infrastructure.security.session_token_service import (
    SessionTokenService,
)

AUTH_REQUIRED_MESSAGE = "Authentication required. Provide a valid session or API key."
SESSION_REQUIRED_MESSAGE = "Session authentication required"

NOT_APPLICABLE = "not_applicable"


def extract_bearer_token(request: Request) -> str | None:
    """Return the Bearer token from the Authorization header, if any."""
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


class AuthStrategy(Protocol):
    """One way of resolving a principal from a request."""

    name: str

    async def authenticate(self, request: Request) -> Result[AuthenticatedUser, str]: ...


class ApiKeyStrategy:
    """Authenticate with a prefixed API key in the Authorization header.

    Args:
        key_prefix: Marker distinguishing API keys from session tokens.
        logger: Logger for validation and last-used failures.
    """

    name = "api_key"

    def __init__(self, *, key_prefix: str, logger: LoggerProtocol) -> None:
        self._key_prefix = key_prefix
        self._logger = logger
        self._pending: set[asyncio.Task[None]] = set()

    async def authenticate(self, request: Request) -> Result[AuthenticatedUser, str]:
        token = extract_bearer_token(request)
        if token is None or not token.startswith(self._key_prefix):
            return Failure(error=NOT_APPLICABLE)

        services = getattr(request.app.state, "services", None)
        if services is None:
            return Failure(error="API key validation unavailable")

        try:
            record = await services.api_keys.validate_api_key(token)
            if record is None:
                return Failure(error="Invalid API key")

            self._schedule_last_used(services.api_keys, record.id)

            user = await services.users.find_user_by_id(record.user_id)
            if user is None:
                self._logger.warning(
                    "API key owner not found",
                    key_id=record.id,
                    user_id=record.user_id,
                )
                return Failure(error="API key owner not found")
            wallets = await services.users.get_user_wallets(user.id)
        except Exception as error:
            self._logger.error("API key validation failed", error=error)
            return Failure(error="API key validation failed")

        return Success(
            value=AuthenticatedUser(
                id=user.id,
                name=user.name,
                email=user.email,
                image=user.image,
                wallets=tuple(wallets),
                auth_method=self.name,
            )
        )

    def _schedule_last_used(self, api_keys: ApiKeyServiceProtocol, key_id: str) -> None:
        task = asyncio.create_task(api_keys.update_last_used(key_id))
        self._pending.add(task)
        task.add_done_callback(partial(self._on_last_used_done, key_id=key_id))

    def _on_last_used_done(self, task: asyncio.Task[None], *, key_id: str) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.warning(
                "Failed to update API key last used timestamp",
                key_id=key_id,
                error_type=type(error).__name__,
                error_message=str(error),
            )


class SessionStrategy:
    """Authenticate with a signed session JWT.

    Args:
        token_service: Session verifier, None when sessions are not configured.
        cookie_name: Session cookie name (the ``__Secure-`` variant is also read).
        api_key_prefix: Bearer tokens with this prefix are never treated as sessions.
    """

    name = "session"

    def __init__(
        self,
        *,
        token_service: SessionTokenService | None,
        cookie_name: str,
        api_key_prefix: str,
    ) -> None:
        self._token_service = token_service
        self._cookie_names = (cookie_name, f"__Secure-{cookie_name}")
        self._api_key_prefix = api_key_prefix

    def _extract_token(self, request: Request) -> str | None:
        for cookie_name in self._cookie_names:
            token = request.cookies.get(cookie_name)
            if token:
                return token
        bearer = extract_bearer_token(request)
        if bearer and not bearer.startswith(self._api_key_prefix):
            return bearer
        return None

    async def authenticate(self, request: Request) -> Result[AuthenticatedUser, str]:
        if self._token_service is None:
            return Failure(error=NOT_APPLICABLE)
        token = self._extract_token(request)
        if token is None:
            return Failure(error=NOT_APPLICABLE)
        return self._token_service.resolve_user(token)


class Authenticator:
    """Try strategies in order; the first success wins.

    Args:
        strategies: Ordered strategies.
        failure_message: Message of the 401 raised when none succeeds.
        logger: Logger for rejected requests.
    """

    def __init__(
        self,
        strategies: Sequence[AuthStrategy],
        *,
        failure_message: str,
        logger: LoggerProtocol,
    ) -> None:
        self._strategies = tuple(strategies)
        self._failure_message = failure_message
        self._logger = logger

    @property
    def strategies(self) -> tuple[AuthStrategy, ...]:
        return self._strategies

    async def authenticate(self, request: Request) -> AuthenticatedUser:
        """Resolve the principal or raise 401.

        Raises:
            ApiError: UNAUTHORIZED when no strategy succeeds.
        """
        reasons: dict[str, str] = {}
        for strategy in self._strategies:
            match await strategy.authenticate(request):
                case Success(value=user):
                    request.state.user = user
                    return user
                case Failure(error=reason):
                    reasons[strategy.name] = reason

        self._logger.info(
            "Request not authenticated",
            path=request.url.path,
            method=request.method,
            reasons=reasons,
        )
        raise ApiError(
            ApiErrorCode.UNAUTHORIZED,
            self._failure_message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def build_authenticators(
    app_settings: Settings, logger: LoggerProtocol
) -> tuple[Authenticator, Authenticator]:
    """Build the (any-auth, session-only) authenticator pair for an app.

    Args:
        app_settings: Settings the application was created with.
        logger: Application logger.

    Returns:
        Tuple of (authenticator, session_authenticator).
    """
    session_strategy = SessionStrategy(
        token_service=build_session_token_service(app_settings),
        cookie_name=app_settings.session_cookie_name,
        api_key_prefix=app_settings.api_key_prefix,
    )
    api_key_strategy = ApiKeyStrategy(
        key_prefix=app_settings.api_key_prefix,
        logger=logger,
    )
    return (
        Authenticator(
            (api_key_strategy, session_strategy),
            failure_message=AUTH_REQUIRED_MESSAGE,
            logger=logger,
        ),
        Authenticator(
            (session_strategy,),
            failure_message=SESSION_REQUIRED_MESSAGE,
            logger=logger,
        ),
    )


async def get_current_user(request: Request) -> AuthenticatedUser:
    """Resolve the principal via API key or session.

    Raises:
        ApiError: 401 UNAUTHORIZED when neither scheme succeeds.
    """
    authenticator: Authenticator = request.app.state.authenticator
    return await authenticator.authenticate(request)


async def get_session_user(request: Request) -> AuthenticatedUser:
    """Resolve the principal via session only.

    Raises:
        ApiError: 401 UNAUTHORIZED without a valid session.
    """
    authenticator: Authenticator = request.app.state.session_authenticator
    return await authenticator.authenticate(request)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
SessionUser = Annotated[AuthenticatedUser, Depends(get_session_user)]
