"""Rate limiting algorithms.

A closed set of interchangeable strategies. They share no state and no base
class; each is an immutable value with the same call signature::

    await algorithm(store, identifier, *, now_ms=None)
        -> Result[RatelimitResponse, StoreError]

Available Algorithms:
    - FixedWindow: atomic counter per fixed window
    - SlidingWindow: weighted current + previous window counters
    - TokenBucket: bucket drained per request, refilled per interval
    - EventualWrite: fixed window decided from a read, increment detached
      (weaker consistency)

Usage:
    from sharedlimit.rate_limiter.algorithms import SlidingWindow

    algorithm = SlidingWindow(tokens=10, window_ms=10_000)
"""

from typing import TypeAlias

from sharedlimit.rate_limiter.algorithms.eventual_write import EventualWrite
from sharedlimit.rate_limiter.algorithms.fixed_window import (
    FIXED_WINDOW_TRANSACTION,
    FixedWindow,
)
from sharedlimit.rate_limiter.algorithms.sliding_window import (
    SLIDING_WINDOW_TRANSACTION,
    SlidingWindow,
)
from sharedlimit.rate_limiter.algorithms.token_bucket import (
    TOKEN_BUCKET_TRANSACTION,
    TokenBucket,
)

Algorithm: TypeAlias = FixedWindow | SlidingWindow | TokenBucket | EventualWrite

__all__ = [
    "Algorithm",
    "EventualWrite",
    "FIXED_WINDOW_TRANSACTION",
    "FixedWindow",
    "SLIDING_WINDOW_TRANSACTION",
    "SlidingWindow",
    "TOKEN_BUCKET_TRANSACTION",
    "TokenBucket",
]
