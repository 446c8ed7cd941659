"""Rate limit algorithm kinds.

Tags the closed set of algorithm variants a RateLimiter can be configured
with. Every algorithm value object exposes its tag as ``kind``.

Usage:
    from sharedlimit.domain.enums import AlgorithmKind

    if limiter.algorithm.kind is AlgorithmKind.EVENTUAL_WRITE:
        ...
"""

from enum import Enum


class AlgorithmKind(str, Enum):
    """Algorithm variants.

    Values:
        FIXED_WINDOW: One counter per fixed window, atomic increment.
        SLIDING_WINDOW: Weighted blend of the current and previous window.
        TOKEN_BUCKET: Bucket drained per request, refilled per interval.
        EVENTUAL_WRITE: Fixed window decided from a read, increment detached.
    """

    FIXED_WINDOW = "fixed_window"
    SLIDING_WINDOW = "sliding_window"
    TOKEN_BUCKET = "token_bucket"
    EVENTUAL_WRITE = "eventual_write"
