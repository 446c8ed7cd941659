"""Fixed window counter algorithm.

Every request inside a fixed window increments one counter; once the counter
passes ``tokens`` all further requests in that window are rejected.

Algorithm Overview:
    bucket = now // window
    key    = identifier:bucket
    count  = INCR key (PEXPIRE window on first increment)
    success   = count <= tokens
    remaining = tokens - count   (negative once over the limit)
    reset     = (bucket + 1) * window

Trade-off:
    Low storage cost and newer requests are never starved by older ones, but
    a burst straddling a window boundary can admit up to ~2x ``tokens`` in a
    short real-time span.

Usage:
    from sharedlimit.rate_limiter.algorithms import FixedWindow

    algorithm = FixedWindow(tokens=10, window_ms=60_000)
    result = await algorithm(store, "sharedlimit:user-123")
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

# KEYS[1]: window counter key (identifier:bucket)
# ARGV[1]: window length in milliseconds
#
# Returns: post-increment counter value
FIXED_WINDOW_TRANSACTION = Transaction(
    name="fixed_window",
    key_count=1,
    script="""
local key    = KEYS[1]
local window = tonumber(ARGV[1])

local count = redis.call("INCR", key)
if count == 1 then
  -- First request in this window: the counter was just created.
  redis.call("PEXPIRE", key, window)
end

return count
""",
)


@dataclass(frozen=True, slots=True)
class FixedWindow:
    """Fixed window counter.

    Attributes:
        tokens: Requests allowed per window.
        window_ms: Window length in milliseconds.

    Raises:
        ValueError: If tokens or window_ms is not positive.
    """

    tokens: int
    window_ms: int

    kind: ClassVar[AlgorithmKind] = AlgorithmKind.FIXED_WINDOW

    def __post_init__(self) -> None:
        if self.tokens <= 0:
            raise ValueError(f"tokens must be positive, got {self.tokens}")
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")

    async def __call__(
        self,
        store: StoreProtocol,
        identifier: str,
        *,
        now_ms: int | None = None,
    ) -> Result[RatelimitResponse, StoreError]:
        """Count this request and decide.

        Args:
            store: Shared store.
            identifier: Namespaced identifier (prefix already applied).
            now_ms: Override current time in epoch ms (for testing).

        Returns:
            Result with the decision, or the store's failure unchanged.
        """
        now = now_ms if now_ms is not None else current_millis()
        bucket = now // self.window_ms
        key = build_key(identifier, bucket)

        result = await store.transaction(
            FIXED_WINDOW_TRANSACTION, keys=[key], args=[self.window_ms]
        )
        match result:
            case Success(value=count) if is_integer(count):
                return Success(
                    value=RatelimitResponse(
                        success=count <= self.tokens,
                        limit=self.tokens,
                        remaining=self.tokens - count,
                        reset=(bucket + 1) * self.window_ms,
                    )
                )
            case Success(value=reply):
                return malformed_reply(FIXED_WINDOW_TRANSACTION.name, reply)
            case Failure():
                return result
