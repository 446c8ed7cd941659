"""Helpers for turning store replies into decisions."""

from typing import Any

from sharedlimit.core.enums import ErrorCode
from sharedlimit.core.result import Failure
from sharedlimit.domain.errors import StoreProtocolError


def malformed_reply(program: str, reply: Any) -> Failure[StoreProtocolError]:
    """Build the failure returned when a reply has an unexpected shape.

    Args:
        program: Transaction or primitive that produced the reply.
        reply: The offending reply.

    Returns:
        Failure wrapping a StoreProtocolError.
    """
    return Failure(
        error=StoreProtocolError(
            code=ErrorCode.STORE_PROTOCOL_ERROR,
            message=f"Unexpected reply from '{program}'",
            operation=program,
            details={"reply": repr(reply)},
        )
    )


def is_integer(value: Any) -> bool:
    """True for ints, excluding bools."""
    return isinstance(value, int) and not isinstance(value, bool)
