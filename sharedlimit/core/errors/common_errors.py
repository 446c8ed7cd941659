"""Common error classes shared across layers.

Usage:
    from sharedlimit.core.enums import ErrorCode
    from sharedlimit.core.errors import ValidationError
    from sharedlimit.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_TIMEOUT,
        message="timeout must be positive",
        field="timeout_ms",
    ))
"""

from dataclasses import dataclass

from sharedlimit.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Returned before any store access happens.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Argument name that failed validation.
        details: Additional context.
    """

    field: str | None = None
