"""Structured error contract for the services layer.

Services raise ServiceError tagged with a ServiceErrorKind so handlers can
classify failures without reading free text. Errors raised without a kind
(or plain exceptions) are still classified by message substring.

Usage:
    raise ServiceError(
        "Chain 999 is not configured",
        kind=ServiceErrorKind.CHAIN_NOT_SUPPORTED,
    )
"""

from enum import Enum
from typing import Any


class ServiceErrorKind(str, Enum):
    """Failure categories a service can report."""

    INVALID_ADDRESS = "invalid_address"
    CHAIN_NOT_SUPPORTED = "chain_not_supported"
    NOT_ERC20 = "not_erc20"
    NOT_A_POOL = "not_a_pool"
    ENRICHMENT_FAILED = "enrichment_failed"
    ONCHAIN_READ_FAILED = "onchain_read_failed"
    NOT_FOUND = "not_found"
    NOT_OWNED = "not_owned"
    ALREADY_EXISTS = "already_exists"
    INVALID_INPUT = "invalid_input"
    EVENT_ORDER = "event_order"


class ServiceError(Exception):
    """Error raised by a services-layer operation.

    Attributes:
        message: Human-readable description (logged, sometimes surfaced as details).
        kind: Optional structured category.
        context: Optional structured context for logging.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ServiceErrorKind | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.context = context or {}

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else None
        return f"ServiceError(kind={kind!r}, message={self.message!r})"
