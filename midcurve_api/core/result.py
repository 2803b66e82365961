"""Result types for railway-oriented programming.

Authentication strategies and token decoding return a Result instead of
raising, so the caller can try the next strategy without exception
plumbing.

Usage:
    def decode(token: str) -> Result[dict[str, Any], str]:
        if not token:
            return Failure(error="Empty token")
        return Success(value={"sub": "user-1"})

    match decode(token):
        case Success(value=claims):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Why the operation did not produce a value.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
