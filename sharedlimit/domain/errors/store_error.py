"""Store error types for the StoreProtocol contract.

These errors are part of the StoreProtocol contract - they define the two
failure cases a shared store can return for any primitive. No layer above the
store catches, retries, or rewrites them: algorithms, the facade, and the
blocking wait hand the same Failure back to their caller.

Usage:
    from sharedlimit.domain.errors import StoreUnavailableError
    from sharedlimit.core.result import Failure

    return Failure(error=StoreUnavailableError(
        code=ErrorCode.STORE_UNAVAILABLE,
        message="Connection refused",
        operation="evalsha",
    ))
"""

from dataclasses import dataclass
from typing import Any

from sharedlimit.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreError(DomainError):
    """Base shared-store failure.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        operation: Store primitive that failed (get, incr, evalsha, ...).
        details: Additional context (key, original error).
    """

    operation: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreUnavailableError(StoreError):
    """The store could not be reached in time.

    Returned when:
    - The connection is refused or reset
    - A socket timeout expires before the reply arrives

    Attributes:
        code: Domain ErrorCode (STORE_UNAVAILABLE).
        message: Human-readable message.
        operation: Store primitive that failed.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreProtocolError(StoreError):
    """The store answered with something unusable.

    Returned when:
    - The server replies with an error (wrong type, script error)
    - The reply cannot be decoded into the expected shape

    Attributes:
        code: Domain ErrorCode (STORE_PROTOCOL_ERROR).
        message: Human-readable message.
        operation: Store primitive that failed.
    """

    pass
