"""sharedlimit - distributed rate limiting over a shared Redis store.

Many independent processes enforce one quota per identifier by keeping all
counters in Redis and running every read-decide-write step as a single atomic
script.

Usage:
    from sharedlimit import RateLimiter, SlidingWindow, Success
    from sharedlimit.core.container import get_store

    limiter = RateLimiter(
        store=get_store(),
        algorithm=SlidingWindow(tokens=10, window_ms=10_000),
    )
    match await limiter.limit("203.0.113.7"):
        case Success(value=response) if response.success:
            ...
"""

from sharedlimit.core.result import Failure, Result, Success
from sharedlimit.domain.enums import AlgorithmKind
from sharedlimit.domain.errors import (
    RatelimitInvariantError,
    StoreError,
    StoreProtocolError,
    StoreUnavailableError,
)
from sharedlimit.domain.value_objects import RatelimitResponse
from sharedlimit.rate_limiter import (
    EventualWrite,
    FixedWindow,
    RateLimiter,
    SlidingWindow,
    TokenBucket,
)

__all__ = [
    "AlgorithmKind",
    "EventualWrite",
    "Failure",
    "FixedWindow",
    "RateLimiter",
    "RatelimitInvariantError",
    "RatelimitResponse",
    "Result",
    "SlidingWindow",
    "StoreError",
    "StoreProtocolError",
    "StoreUnavailableError",
    "Success",
    "TokenBucket",
]
