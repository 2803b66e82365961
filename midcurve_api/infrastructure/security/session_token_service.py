"""Session token verification (adapter).

Verifies the signed session JWT issued by the web sign-in flow and turns
its claims into an AuthenticatedUser. Uses PyJWT with HMAC (HS256 by
default).

Claims read:
    sub | id      -> user id (required)
    name, email   -> optional profile fields
    picture | image -> optional avatar
    wallets       -> optional list of wallet objects (camelCase keys)

Tokens are never logged.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from midcurve_api.core.result import Failure, Result, Success
from midcurve_api.domain.types import AuthenticatedUser, WalletAddress

INVALID_SESSION = "Invalid or expired session"
MISSING_SUBJECT = "Session is missing a user id"


class SessionTokenService:
    """Verify session JWTs and extract the principal.

    Args:
        secret_key: HMAC secret shared with the session issuer.
        algorithm: JWT algorithm (default HS256).
    """

    def __init__(self, *, secret_key: str, algorithm: str = "HS256") -> None:
        if not secret_key:
            raise ValueError("Session secret must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def decode(self, token: str) -> Result[dict[str, Any], str]:
        """Verify signature and expiry, returning the raw claims.

        Args:
            token: Encoded JWT.

        Returns:
            Success with the claims dict, or Failure with INVALID_SESSION.
        """
        try:
            claims: dict[str, Any] = jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm]
            )
        except InvalidTokenError:
            return Failure(error=INVALID_SESSION)
        return Success(value=claims)

    def resolve_user(self, token: str) -> Result[AuthenticatedUser, str]:
        """Verify the token and compose the principal from its claims.

        Args:
            token: Encoded JWT.

        Returns:
            Success with AuthenticatedUser, or Failure with a reason.
        """
        match self.decode(token):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=claims):
                user_id = claims.get("sub") or claims.get("id")
                if not user_id:
                    return Failure(error=MISSING_SUBJECT)
                try:
                    wallets = tuple(
                        _wallet_from_claim(raw, str(user_id))
                        for raw in claims.get("wallets") or ()
                    )
                except (KeyError, TypeError, ValueError, OverflowError, OSError):
                    return Failure(error=INVALID_SESSION)
                return Success(
                    value=AuthenticatedUser(
                        id=str(user_id),
                        name=claims.get("name"),
                        email=claims.get("email"),
                        image=claims.get("picture") or claims.get("image"),
                        wallets=wallets,
                        auth_method="session",
                    )
                )
        return Failure(error=INVALID_SESSION)


def _wallet_from_claim(raw: Mapping[str, Any], user_id: str) -> WalletAddress:
    if not isinstance(raw, Mapping):
        raise TypeError("Wallet claim must be an object")
    created_at = _parse_timestamp(raw.get("createdAt"))
    return WalletAddress(
        id=str(raw["id"]),
        user_id=str(raw.get("userId", user_id)),
        address=str(raw["address"]),
        chain_id=int(raw["chainId"]),
        is_primary=bool(raw.get("isPrimary", False)),
        created_at=created_at,
        updated_at=_parse_timestamp(raw.get("updatedAt")) if raw.get("updatedAt") else created_at,
    )


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, UTC)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
