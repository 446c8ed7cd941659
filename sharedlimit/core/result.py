"""Result types for railway-oriented error handling.

Every store round trip and every rate limit decision returns a Result instead
of raising. Callers branch on the variant with structural pattern matching.

Usage:
    result = await limiter.limit("user-123")
    match result:
        case Success(value=response):
            if not response.success:
                ...
        case Failure(error=error):
            logger.error("Rate limit check failed", error_code=error.code.value)
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
        error: The error describing what went wrong.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
