"""Ports to the services layer.

The services layer owns on-chain reads, CoinGecko enrichment, persistence,
nonce storage, SIWE signature checking and PnL/APR computation. The API
layer only sees these protocols. Implementations are structural: any
object with matching async methods satisfies them.

Failures are reported by raising. A ServiceError tagged with a
ServiceErrorKind is classified structurally; any other exception falls
back to message-substring classification in the calling handler.

Token, pool, position, ledger and APR values are opaque (``Any``): they
are serialized as returned.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from midcurve_api.domain.types import (
        ApiKeyRecord,
        CreatedApiKey,
        PoolMetrics,
        PositionPage,
        PositionQuery,
        UserRecord,
        WalletAddress,
    )
    from midcurve_api.schemas.auth_schemas import SiweMessage


class ApiKeyServiceProtocol(Protocol):
    """API key storage and validation."""

    async def validate_api_key(self, key: str) -> ApiKeyRecord | None:
        """Return the key record when `key` is valid, None otherwise."""
        ...

    async def update_last_used(self, key_id: str) -> None: ...

    async def get_user_api_keys(self, user_id: str) -> Sequence[ApiKeyRecord]: ...

    async def create_api_key(self, user_id: str, name: str) -> CreatedApiKey: ...

    async def revoke_api_key(self, user_id: str, key_id: str) -> None:
        """Revoke a key owned by `user_id`.

        Raises when the key does not exist or belongs to another user.
        """
        ...


class UserServiceProtocol(Protocol):
    """User profiles and linked wallets."""

    async def find_user_by_id(self, user_id: str) -> UserRecord | None: ...

    async def get_user_wallets(self, user_id: str) -> Sequence[WalletAddress]: ...

    async def link_wallet(
        self, user_id: str, address: str, chain_id: int
    ) -> WalletAddress:
        """Bind a wallet to a user. Raises when already registered."""
        ...


class NonceServiceProtocol(Protocol):
    """One-time SIWE nonces."""

    async def generate_nonce(self) -> str: ...

    async def validate_nonce(self, nonce: str) -> bool: ...

    async def consume_nonce(self, nonce: str) -> None: ...


class SiweVerifierProtocol(Protocol):
    """Signature verification for Sign-In-With-Ethereum messages."""

    async def verify(self, message: SiweMessage, signature: str) -> bool: ...


class Erc20TokenServiceProtocol(Protocol):
    """ERC-20 token discovery and search."""

    async def discover(self, *, address: str, chain_id: int) -> Any:
        """Return the token, creating it on first discovery."""
        ...

    async def search_tokens(
        self,
        *,
        chain_id: int,
        symbol: str | None = None,
        name: str | None = None,
        address: str | None = None,
    ) -> Sequence[Any]: ...


class UniswapV3PoolServiceProtocol(Protocol):
    """Uniswap V3 pool discovery."""

    async def discover(self, *, pool_address: str, chain_id: int) -> Any: ...


class SubgraphClientProtocol(Protocol):
    """Uniswap V3 subgraph access."""

    async def get_pool_metrics(self, chain_id: int, pool_address: str) -> PoolMetrics: ...


class UniswapV3PositionServiceProtocol(Protocol):
    """Uniswap V3 position lifecycle, ledger and APR history.

    Every method taking `user_id` scopes its lookup to that user.
    Position hashes have the form ``uniswapv3/{chainId}/{nftId}``.
    """

    async def find_by_position_hash(
        self, user_id: str, position_hash: str
    ) -> Any | None: ...

    async def refresh(self, position_id: str) -> Any: ...

    async def create_position(
        self, user_id: str, chain_id: int, nft_id: int, data: dict[str, Any]
    ) -> Any:
        """Create a position from its first INCREASE_LIQUIDITY event."""
        ...

    async def append_events(
        self, user_id: str, chain_id: int, nft_id: int, events: Sequence[dict[str, Any]]
    ) -> Any:
        """Append ledger events. Raises on out-of-order events."""
        ...

    async def delete_by_position_hash(self, user_id: str, position_hash: str) -> None:
        """Delete the position. A missing position is not an error."""
        ...

    async def find_many(self, user_id: str, query: PositionQuery) -> PositionPage: ...

    async def import_position(self, user_id: str, chain_id: int, nft_id: int) -> Any: ...

    async def get_ledger(self, position_id: str) -> Sequence[Any]: ...

    async def get_apr_periods(self, position_id: str) -> Sequence[Any]: ...


class PositionListServiceProtocol(Protocol):
    """Cross-protocol position listing."""

    async def list_positions(self, user_id: str, query: PositionQuery) -> PositionPage: ...
