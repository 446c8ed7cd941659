"""Rate limit decision value object.

Every algorithm and the RateLimiter facade produce exactly this shape, so
callers never need to know which algorithm made the decision.

Usage:
    from sharedlimit.domain.value_objects import RatelimitResponse

    response = RatelimitResponse(success=True, limit=10, remaining=9, reset=1700000060000)
    if not response.success:
        raise HTTPException(429, headers=response.to_headers())
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RatelimitResponse:
    """Outcome of a single rate limit decision.

    Attributes:
        success: Whether this request may proceed.
        limit: Configured quota for the window or bucket.
        remaining: Quota units left after this decision.
        reset: Epoch milliseconds at or after which quota state changes.
    """

    success: bool
    """Whether this request may proceed."""

    limit: int
    """Configured quota (tokens per window, or bucket capacity)."""

    remaining: int
    """Quota units left after this decision.

    May be negative under a fixed window once the quota is exceeded; the
    magnitude tells how far over the limit the caller is.
    """

    reset: int
    """Epoch milliseconds of the next window boundary or refill."""

    def to_headers(self) -> dict[str, str]:
        """Render the decision as ``X-RateLimit-*`` response headers.

        Returns:
            dict[str, str]: Limit, remaining (clamped at 0) and reset headers.
        """
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(max(0, self.remaining)),
            "X-RateLimit-Reset": str(self.reset),
        }
