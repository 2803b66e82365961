"""Service error classification.

Each endpoint declares an ordered tuple of ErrorRule. A failure raised by
the services layer is classified once:

1. If it is a ServiceError with a kind, the first rule listing that kind wins.
2. Otherwise (or when no rule lists the kind), the first rule whose
   substrings occur in the error message wins. Matching is case-sensitive.
3. Otherwise the failure is an INTERNAL_SERVER_ERROR. The caller gets the
   endpoint's generic message; the full error is logged server-side only.

Usage:
    TOKEN_DISCOVERY_RULES = (
        ErrorRule(
            code=ApiErrorCode.CHAIN_NOT_SUPPORTED,
            message="Chain not supported",
            kinds=frozenset({ServiceErrorKind.CHAIN_NOT_SUPPORTED}),
            substrings=("not configured",),
        ),
    )

    token = await call_service(
        erc20.discover(address=address, chain_id=chain_id),
        rules=TOKEN_DISCOVERY_RULES,
        fallback_message="Failed to discover token",
        operation="discover_erc20_token",
        logger=logger,
    )
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias, TypeVar

from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError, ServiceError, ServiceErrorKind
from midcurve_api.domain.protocols import LoggerProtocol

T = TypeVar("T")

DetailsFactory: TypeAlias = Callable[[Exception], Any]


def error_message_details(error: Exception) -> str:
    """Default details: the service's own message."""
    return str(error)


@dataclass(frozen=True, slots=True, kw_only=True)
class ErrorRule:
    """One classification rule.

    Attributes:
        code: Code to respond with when the rule matches.
        message: Client-facing message. None passes the service message through.
        kinds: Structured kinds this rule handles.
        substrings: Message fragments this rule handles (any one suffices).
        details: Builds the `details` field; None omits it.
    """

    code: ApiErrorCode
    message: str | None = None
    kinds: frozenset[ServiceErrorKind] = field(default_factory=frozenset)
    substrings: tuple[str, ...] = ()
    details: DetailsFactory | None = error_message_details

    def matches_kind(self, kind: ServiceErrorKind | None) -> bool:
        return kind is not None and kind in self.kinds

    def matches_message(self, message: str) -> bool:
        return any(fragment in message for fragment in self.substrings)

    def to_api_error(self, error: Exception) -> ApiError:
        return ApiError(
            code=self.code,
            message=self.message if self.message is not None else str(error),
            details=self.details(error) if self.details is not None else None,
        )


def classify_service_error(
    error: Exception, rules: Sequence[ErrorRule]
) -> ErrorRule | None:
    """Return the rule matching `error`, or None when nothing matches."""
    kind = error.kind if isinstance(error, ServiceError) else None
    for rule in rules:
        if rule.matches_kind(kind):
            return rule
    message = str(error)
    for rule in rules:
        if rule.matches_message(message):
            return rule
    return None


async def call_service(
    awaitable: Awaitable[T],
    *,
    rules: Sequence[ErrorRule],
    fallback_message: str,
    operation: str,
    logger: LoggerProtocol,
    **context: Any,
) -> T:
    """Await a service call, converting failures into ApiError.

    Args:
        awaitable: The pending service call.
        rules: Ordered classification rules for this endpoint.
        fallback_message: Message for unclassified failures.
        operation: Operation name for logs.
        logger: Logger for classified (warning) and unclassified (error) failures.
        **context: Extra structured log context.

    Returns:
        The service result.

    Raises:
        ApiError: For every failure, classified or not.
    """
    try:
        return await awaitable
    except ApiError:
        raise
    except Exception as error:
        rule = classify_service_error(error, rules)
        if rule is None:
            logger.error(
                "Service call failed",
                error=error,
                operation=operation,
                **context,
            )
            raise ApiError(
                code=ApiErrorCode.INTERNAL_SERVER_ERROR,
                message=fallback_message,
            ) from error
        logger.warning(
            "Service call rejected",
            operation=operation,
            code=rule.code.value,
            error_type=type(error).__name__,
            error_message=str(error),
            **context,
        )
        raise rule.to_api_error(error) from error
