"""Domain-level error codes (machine-readable).

Error codes follow the ENTITY_ACTION_REASON naming convention and travel
inside DomainError values carried by Failure results.

Categories:
- Validation errors (INVALID_*)
- Store errors (STORE_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Validation errors
    INVALID_TIMEOUT = "invalid_timeout"

    # Store errors
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_PROTOCOL_ERROR = "store_protocol_error"

