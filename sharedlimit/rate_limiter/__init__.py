"""Rate limiting facade and algorithms.

Usage:
    from sharedlimit.rate_limiter import RateLimiter, TokenBucket

    limiter = RateLimiter(
        store=store,
        algorithm=TokenBucket(refill_rate=5, interval_ms=10_000, max_tokens=20),
    )
"""

from sharedlimit.rate_limiter.algorithms import (
    Algorithm,
    EventualWrite,
    FixedWindow,
    SlidingWindow,
    TokenBucket,
)
from sharedlimit.rate_limiter.keys import KEY_DELIMITER, build_key
from sharedlimit.rate_limiter.service import RateLimiter

__all__ = [
    "Algorithm",
    "EventualWrite",
    "FixedWindow",
    "KEY_DELIMITER",
    "RateLimiter",
    "SlidingWindow",
    "TokenBucket",
    "build_key",
]
