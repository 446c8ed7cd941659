"""Domain errors package.

Usage:
    from sharedlimit.domain.errors import StoreError, StoreUnavailableError
    from sharedlimit.domain.errors import RatelimitInvariantError
"""

from sharedlimit.domain.errors.invariant_error import RatelimitInvariantError
from sharedlimit.domain.errors.store_error import (
    StoreError,
    StoreProtocolError,
    StoreUnavailableError,
)

__all__ = [
    "RatelimitInvariantError",
    "StoreError",
    "StoreProtocolError",
    "StoreUnavailableError",
]
