"""Base domain error class for railway-oriented programming.

DomainError is the base class for every expected failure in sharedlimit.
Errors flow through the system as data inside Failure results, not as
exceptions.
"""

from dataclasses import dataclass
from typing import Any

from sharedlimit.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
