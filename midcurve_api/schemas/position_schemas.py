"""Position request schemas.

Covers Uniswap V3 position creation (PUT), ledger event appends (PATCH),
import, and the list queries for both the protocol-specific and the
cross-protocol listing.

Ledger event rules:
    INCREASE_LIQUIDITY / DECREASE_LIQUIDITY: liquidity required, recipient forbidden
    COLLECT: recipient required

Event ordering against the existing ledger, by
(blockNumber, transactionIndex, logIndex), is enforced by the services
layer, not here.
"""

from enum import Enum
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from midcurve_api.schemas.common_schemas import (
    ADDRESS_PATTERN,
    TX_HASH_PATTERN,
    UINT_STRING_PATTERN,
    CamelModel,
    IsoDateTime,
    PaginationQuery,
    QueryInt,
)

MAX_EVENTS_PER_UPDATE = 100


class LedgerEventType(str, Enum):
    INCREASE_LIQUIDITY = "INCREASE_LIQUIDITY"
    DECREASE_LIQUIDITY = "DECREASE_LIQUIDITY"
    COLLECT = "COLLECT"


class PositionStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    ALL = "all"


class PositionSortBy(str, Enum):
    CREATED_AT = "createdAt"
    POSITION_OPENED_AT = "positionOpenedAt"
    CURRENT_VALUE = "currentValue"
    UNREALIZED_PNL = "unrealizedPnl"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# Ledger events
# =============================================================================


class _OnChainEventFields(CamelModel):
    """Chain coordinates and token amounts shared by every ledger event."""

    timestamp: IsoDateTime = Field(..., description="Block timestamp (ISO-8601)")
    block_number: str = Field(..., alias="blockNumber", pattern=UINT_STRING_PATTERN)
    transaction_index: int = Field(..., alias="transactionIndex", ge=0, strict=True)
    log_index: int = Field(..., alias="logIndex", ge=0, strict=True)
    transaction_hash: str = Field(..., alias="transactionHash", pattern=TX_HASH_PATTERN)
    amount0: str = Field(..., pattern=UINT_STRING_PATTERN)
    amount1: str = Field(..., pattern=UINT_STRING_PATTERN)


class IncreaseLiquidityEvent(_OnChainEventFields):
    """The first INCREASE_LIQUIDITY event, used to create a position."""

    liquidity: str = Field(..., pattern=UINT_STRING_PATTERN)


class LedgerEventInput(_OnChainEventFields):
    """One event appended to a position ledger.

    The conditional checks run as field validators so each violation is
    reported at the offending field. ``event_type`` is declared first so it
    is available in ``info.data``.
    """

    event_type: LedgerEventType = Field(..., alias="eventType")
    liquidity: str | None = Field(
        default=None, pattern=UINT_STRING_PATTERN, validate_default=True
    )
    recipient: str | None = Field(
        default=None, pattern=ADDRESS_PATTERN, validate_default=True
    )

    @field_validator("liquidity")
    @classmethod
    def check_liquidity(cls, v: str | None, info: ValidationInfo) -> str | None:
        event_type = info.data.get("event_type")
        if event_type is None or event_type is LedgerEventType.COLLECT:
            return v
        if v is None:
            raise ValueError(f"Liquidity is required for {event_type.value} events")
        return v

    @field_validator("recipient")
    @classmethod
    def check_recipient(cls, v: str | None, info: ValidationInfo) -> str | None:
        event_type = info.data.get("event_type")
        if event_type is None:
            return v
        if event_type is LedgerEventType.COLLECT:
            if v is None:
                raise ValueError("Recipient is required for COLLECT events")
            return v
        if v is not None:
            raise ValueError(
                f"Recipient is not allowed for {event_type.value} events (only for COLLECT)"
            )
        return v


# =============================================================================
# Request bodies
# =============================================================================


class CreateUniswapV3PositionRequest(CamelModel):
    """Body of PUT /v1/positions/uniswapv3/{chainId}/{nftId}."""

    pool_address: str = Field(..., alias="poolAddress", pattern=ADDRESS_PATTERN)
    tick_upper: int = Field(..., alias="tickUpper", strict=True)
    tick_lower: int = Field(..., alias="tickLower", strict=True)
    owner_address: str = Field(..., alias="ownerAddress", pattern=ADDRESS_PATTERN)
    quote_token_address: str | None = Field(
        default=None, alias="quoteTokenAddress", pattern=ADDRESS_PATTERN
    )
    increase_event: IncreaseLiquidityEvent = Field(..., alias="increaseEvent")


class UpdateUniswapV3PositionRequest(CamelModel):
    """Body of PATCH /v1/positions/uniswapv3/{chainId}/{nftId}."""

    events: list[LedgerEventInput] = Field(
        ..., min_length=1, max_length=MAX_EVENTS_PER_UPDATE
    )


class ImportUniswapV3PositionRequest(CamelModel):
    """Body of POST /v1/positions/uniswapv3/import."""

    chain_id: int = Field(..., alias="chainId", gt=0, strict=True)
    nft_id: int = Field(..., alias="nftId", gt=0, strict=True)


# =============================================================================
# List queries
# =============================================================================


class ListUniswapV3PositionsQuery(PaginationQuery):
    """Query of GET /v1/positions/uniswapv3/list."""

    chain_id: QueryInt | None = Field(default=None, alias="chainId", gt=0)
    status: PositionStatus = PositionStatus.ALL


class ListPositionsQuery(PaginationQuery):
    """Query of GET /v1/positions/list (all protocols)."""

    protocols: list[str] | None = None
    status: PositionStatus = PositionStatus.ALL
    sort_by: PositionSortBy = Field(default=PositionSortBy.CREATED_AT, alias="sortBy")
    sort_direction: SortDirection = Field(default=SortDirection.DESC, alias="sortDirection")

    @field_validator("protocols", mode="before")
    @classmethod
    def split_protocols(cls, v: Any) -> Any:
        """Accept comma-separated protocol names."""
        if isinstance(v, str):
            names = [name.strip() for name in v.split(",") if name.strip()]
            return names or None
        return v
