"""JSON-safe serialization of service results.

Service values carry 128/160/256-bit integers (liquidity, sqrtPriceX96,
fee growth accumulators, token amounts) and timestamps. JSON numbers lose
precision past 2**53 - 1, so:

- integers under a known wide-integer key become decimal strings
- any integer outside the IEEE-754 safe range becomes a decimal string
- datetimes become ISO-8601 strings (UTC rendered with a ``Z`` suffix)
- dataclasses and pydantic models become dicts with camelCase keys

The conversion is a deep copy and never routes an integer through float.
Strings pass through unchanged, so serializing an already-serialized
value is a no-op.

Usage:
    payload = serialize(position)
"""

import dataclasses
import re
from collections.abc import Mapping, Set
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

MAX_SAFE_INTEGER = 2**53 - 1

WIDE_INTEGER_FIELDS: frozenset[str] = frozenset(
    {
        # Pool state
        "liquidity",
        "sqrtPriceX96",
        "feeGrowthGlobal0",
        "feeGrowthGlobal1",
        "feeGrowthGlobal0X128",
        "feeGrowthGlobal1X128",
        # Position state
        "feeGrowthInside0LastX128",
        "feeGrowthInside1LastX128",
        "tokensOwed0",
        "tokensOwed1",
        "liquidityAfter",
        "deltaL",
        # Amounts
        "amount0",
        "amount1",
        "token0Amount",
        "token1Amount",
        "feesCollected0",
        "feesCollected1",
        "uncollectedPrincipal0",
        "uncollectedPrincipal1",
        "totalSupply",
        # Quote-token valuations
        "currentValue",
        "costBasis",
        "costBasisAfter",
        "deltaCostBasis",
        "realizedPnl",
        "realizedPnlAfter",
        "deltaPnl",
        "unrealizedPnl",
        "collectedFees",
        "collectedFeeValue",
        "unClaimedFees",
        "unclaimedFees",
        "poolPrice",
        "tokenValue",
        # Chain coordinates
        "blockNumber",
    }
)

_SNAKE_CASE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)+$")


def to_camel(name: str) -> str:
    """Convert a snake_case identifier to camelCase.

    Keys that are not plain snake_case identifiers (already camelCase,
    addresses, position hashes) are returned unchanged.
    """
    if not _SNAKE_CASE.match(name):
        return name
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601, UTC with a ``Z`` suffix.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def serialize(value: Any, *, key: str | None = None) -> Any:
    """Deep-copy `value` into a JSON-safe structure.

    Args:
        value: Any service result.
        key: The mapping key `value` was found under, if any.

    Returns:
        JSON-safe value (dict, list, str, int, float, bool or None).

    Raises:
        TypeError: For values with no JSON representation.
    """
    if value is None or isinstance(value, (bool, str, float)):
        return value
    if isinstance(value, int):
        if (key is not None and key in WIDE_INTEGER_FIELDS) or abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value
    if isinstance(value, Enum):
        return serialize(value.value, key=key)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, BaseModel):
        return _serialize_mapping(value.model_dump(by_alias=True, exclude_unset=True))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize_mapping(
            {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
        )
    if isinstance(value, Mapping):
        return _serialize_mapping(value)
    if isinstance(value, (list, tuple, Set)):
        return [serialize(item, key=key) for item in value]
    raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def _serialize_mapping(mapping: Mapping[Any, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for raw_key, item in mapping.items():
        name = to_camel(str(raw_key))
        result[name] = serialize(item, key=name)
    return result
