"""Sliding window counter algorithm.

Approximates a sliding log with O(1) storage by weighting the previous
window's counter by how much of it still overlaps the sliding window.

Algorithm Overview:
    current_bucket  = now // window
    previous_bucket = current_bucket - window
    elapsed         = (now % window) / window
    estimate        = previous * (1 - elapsed) + current

    estimate >= tokens  -> deny, nothing written, remaining = 0
    otherwise           -> INCR current (PEXPIRE 2 * window + 1s on creation)
                           remaining = tokens - new_current

    success = remaining > 0
    reset   = (current_bucket + 1) * window

Note:
    ``previous_bucket`` subtracts the window length (not 1) from the bucket
    index. Existing deployments share keys shaped this way, so the offset is
    kept as is.

Usage:
    from sharedlimit.rate_limiter.algorithms import SlidingWindow

    algorithm = SlidingWindow(tokens=10, window_ms=10_000)
    result = await algorithm(store, "sharedlimit:203.0.113.7")
"""

from dataclasses import dataclass
from typing import ClassVar

from sharedlimit.core.clock import current_millis
from sharedlimit.core.result import Failure, Result, Success
from sharedlimit.domain.enums import AlgorithmKind
from sharedlimit.domain.errors import StoreError
from sharedlimit.domain.protocols import StoreProtocol
from sharedlimit.domain.value_objects import RatelimitResponse, Transaction
from sharedlimit.rate_limiter.algorithms.replies import is_integer, malformed_reply
from sharedlimit.rate_limiter.keys import build_key

# Extra lifetime for the current counter so it is still readable as the
# "previous" counter during the whole next window.
EXPIRY_GRACE_MS = 1000

# KEYS[1]: current window counter
# KEYS[2]: previous window counter
# ARGV[1]: tokens per window
# ARGV[2]: current timestamp (epoch ms)
# ARGV[3]: window length in milliseconds
# ARGV[4]: grace added to the counter expiry in milliseconds
#
# Returns: tokens left after this request (0 when denied without writing)
SLIDING_WINDOW_TRANSACTION = Transaction(
    name="sliding_window",
    key_count=2,
    script="""
local current_key  = KEYS[1]
local previous_key = KEYS[2]
local tokens       = tonumber(ARGV[1])
local now          = tonumber(ARGV[2])
local window       = tonumber(ARGV[3])
local grace        = tonumber(ARGV[4])

local current  = tonumber(redis.call("GET", current_key) or "0")
local previous = tonumber(redis.call("GET", previous_key) or "0")

local elapsed = (now % window) / window
if previous * (1 - elapsed) + current >= tokens then
  return 0
end

local count = redis.call("INCR", current_key)
if count == 1 then
  redis.call("PEXPIRE", current_key, window * 2 + grace)
end

return tokens - count
""",
)


@dataclass(frozen=True, slots=True)
class SlidingWindow:
    """Sliding window counter.

    Attributes:
        tokens: Requests allowed per window.
        window_ms: Window length in milliseconds.

    Raises:
        ValueError: If tokens or window_ms is not positive.
    """

    tokens: int
    window_ms: int

    kind: ClassVar[AlgorithmKind] = AlgorithmKind.SLIDING_WINDOW

    def __post_init__(self) -> None:
        if self.tokens <= 0:
            raise ValueError(f"tokens must be positive, got {self.tokens}")
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")

    def bucket_keys(self, identifier: str, now_ms: int) -> tuple[str, str]:
        """Return the (current, previous) counter keys at ``now_ms``."""
        current_bucket = now_ms // self.window_ms
        previous_bucket = current_bucket - self.window_ms
        return (
            build_key(identifier, current_bucket),
            build_key(identifier, previous_bucket),
        )

    async def __call__(
        self,
        store: StoreProtocol,
        identifier: str,
        *,
        now_ms: int | None = None,
    ) -> Result[RatelimitResponse, StoreError]:
        """Weigh both windows and decide.

        Args:
            store: Shared store.
            identifier: Namespaced identifier (prefix already applied).
            now_ms: Override current time in epoch ms (for testing).

        Returns:
            Result with the decision, or the store's failure unchanged.
        """
        now = now_ms if now_ms is not None else current_millis()
        current_key, previous_key = self.bucket_keys(identifier, now)

        result = await store.transaction(
            SLIDING_WINDOW_TRANSACTION,
            keys=[current_key, previous_key],
            args=[self.tokens, now, self.window_ms, EXPIRY_GRACE_MS],
        )
        match result:
            case Success(value=remaining) if is_integer(remaining):
                return Success(
                    value=RatelimitResponse(
                        success=remaining > 0,
                        limit=self.tokens,
                        remaining=remaining,
                        reset=(now // self.window_ms + 1) * self.window_ms,
                    )
                )
            case Success(value=reply):
                return malformed_reply(SLIDING_WINDOW_TRANSACTION.name, reply)
            case Failure():
                return result
