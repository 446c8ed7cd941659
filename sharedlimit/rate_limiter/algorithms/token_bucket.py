"""Token bucket algorithm.

A bucket holds up to ``max_tokens`` permits and is refilled by
``refill_rate`` permits per ``interval``. Every request removes one permit;
an empty bucket rejects the request without touching stored state.

Bucket State (hash):
    updatedAt: epoch ms of the last write
    tokens:    permits left

Algorithm Overview (single atomic program):
    1. No bucket yet       -> tokens = max_tokens - 1, set expiry = interval,
                              reset = now + interval
    2. now >= updatedAt + interval
                           -> tokens = min(max_tokens, tokens + refill_rate) - 1,
                              reset = now + interval
    3. tokens > 0          -> tokens = tokens - 1,
                              reset = updatedAt + interval
    4. otherwise           -> no write, reset = updatedAt + interval

    success = remaining > 0

Refill is one discrete step per request: idle time longer than ``interval``
still adds only ``refill_rate`` permits.

Usage:
    from sharedlimit.rate_limiter.algorithms import TokenBucket

    # 5 permits per 10s, bursts of up to 20
    algorithm = TokenBucket(refill_rate=5, interval_ms=10_000, max_tokens=20)
    result = await algorithm(store, "sharedlimit:api-key-42")
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

# KEYS[1]: bucket hash key
# ARGV[1]: max_tokens (bucket capacity)
# ARGV[2]: interval in milliseconds
# ARGV[3]: refill_rate (permits added per interval)
# ARGV[4]: current timestamp (epoch ms)
#
# Returns: {remaining, reset}
TOKEN_BUCKET_TRANSACTION = Transaction(
    name="token_bucket",
    key_count=1,
    script="""
local key         = KEYS[1]
local max_tokens  = tonumber(ARGV[1])
local interval    = tonumber(ARGV[2])
local refill_rate = tonumber(ARGV[3])
local now         = tonumber(ARGV[4])

local bucket = redis.call("HMGET", key, "updatedAt", "tokens")

if bucket[1] == false then
  local remaining = max_tokens - 1
  redis.call("HSET", key, "updatedAt", now, "tokens", remaining)
  redis.call("PEXPIRE", key, interval)
  return {remaining, now + interval}
end

local updated_at = tonumber(bucket[1])
local tokens     = tonumber(bucket[2])

if now >= updated_at + interval then
  local remaining = math.min(max_tokens, tokens + refill_rate) - 1
  redis.call("HSET", key, "updatedAt", now, "tokens", remaining)
  return {remaining, now + interval}
end

if tokens > 0 then
  local remaining = tokens - 1
  redis.call("HSET", key, "updatedAt", now, "tokens", remaining)
  return {remaining, updated_at + interval}
end

-- Empty and no refill due: deny without writing.
return {tokens, updated_at + interval}
""",
)


@dataclass(frozen=True, slots=True)
class TokenBucket:
    """Token bucket.

    Attributes:
        refill_rate: Permits added per interval.
        interval_ms: Refill interval in milliseconds.
        max_tokens: Bucket capacity; a new bucket starts full.

    Raises:
        ValueError: If any parameter is not positive.
    """

    refill_rate: int
    interval_ms: int
    max_tokens: int

    kind: ClassVar[AlgorithmKind] = AlgorithmKind.TOKEN_BUCKET

    def __post_init__(self) -> None:
        if self.refill_rate <= 0:
            raise ValueError(f"refill_rate must be positive, got {self.refill_rate}")
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {self.interval_ms}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    def bucket_key(self, identifier: str, now_ms: int) -> str:
        """Return the bucket hash key at ``now_ms``."""
        return build_key(identifier, now_ms // self.interval_ms)

    async def __call__(
        self,
        store: StoreProtocol,
        identifier: str,
        *,
        now_ms: int | None = None,
    ) -> Result[RatelimitResponse, StoreError]:
        """Take one permit if available.

        Args:
            store: Shared store.
            identifier: Namespaced identifier (prefix already applied).
            now_ms: Override current time in epoch ms (for testing).

        Returns:
            Result with the decision, or the store's failure unchanged.
        """
        now = now_ms if now_ms is not None else current_millis()

        result = await store.transaction(
            TOKEN_BUCKET_TRANSACTION,
            keys=[self.bucket_key(identifier, now)],
            args=[self.max_tokens, self.interval_ms, self.refill_rate, now],
        )
        match result:
            case Success(value=[remaining, reset]) if is_integer(
                remaining
            ) and is_integer(reset):
                return Success(
                    value=RatelimitResponse(
                        success=remaining > 0,
                        limit=self.max_tokens,
                        remaining=remaining,
                        reset=reset,
                    )
                )
            case Success(value=reply):
                return malformed_reply(TOKEN_BUCKET_TRANSACTION.name, reply)
            case Failure():
                return result
