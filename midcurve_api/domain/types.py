"""Transient value types owned by the API layer.

These records describe identities and service results the API layer
reasons about directly. Tokens, pools, positions, ledger entries and APR
periods stay opaque: they are whatever the services layer returns and
are only passed through the serializer.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class WalletAddress:
    """Read-only view of a wallet linked to a user."""

    id: str
    user_id: str
    address: str
    chain_id: int
    is_primary: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class UserRecord:
    """User profile as stored by the services layer."""

    id: str
    name: str | None = None
    email: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticatedUser:
    """Principal resolved for a single request.

    Attributes:
        id: User identifier every user-owned query is scoped to.
        name: Display name, if known.
        email: Email, if known.
        image: Avatar URL, if known.
        wallets: Wallets linked to the user.
        auth_method: Which strategy resolved the principal ("api_key" or "session").
    """

    id: str
    name: str | None = None
    email: str | None = None
    image: str | None = None
    wallets: Sequence[WalletAddress] = ()
    auth_method: str = "session"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApiKeyRecord:
    """Stored API key metadata. The full key is never kept."""

    id: str
    user_id: str
    name: str
    key_prefix: str
    last_used: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class CreatedApiKey:
    """Result of key creation: the record plus the full key, shown once."""

    api_key: ApiKeyRecord
    key: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PoolMetrics:
    """Subgraph metrics for a pool, USD amounts as decimal strings."""

    tvl_usd: str
    volume_usd: str
    fees_usd: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PositionPage:
    """One page of positions plus the unpaginated total."""

    positions: Sequence[Any]
    total: int


@dataclass(frozen=True, slots=True, kw_only=True)
class PositionQuery:
    """Filter, sort and page arguments passed to position listing."""

    chain_id: int | None = None
    status: str = "all"
    protocols: Sequence[str] | None = None
    sort_by: str = "createdAt"
    sort_direction: str = "desc"
    limit: int = 20
    offset: int = 0
