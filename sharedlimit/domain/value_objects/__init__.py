"""Domain value objects.

Usage:
    from sharedlimit.domain.value_objects import RatelimitResponse, Transaction
"""

from sharedlimit.domain.value_objects.ratelimit_response import RatelimitResponse
from sharedlimit.domain.value_objects.transaction import Transaction

__all__ = ["RatelimitResponse", "Transaction"]
