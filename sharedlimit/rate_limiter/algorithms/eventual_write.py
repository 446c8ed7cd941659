"""Eventual write fixed window (best-effort, NOT atomic).

Same window and key scheme as FixedWindow, but the decision is made from a
plain read of the counter and the increment is detached: the caller gets its
answer without waiting for the write round trip.

Consistency Contract (weaker than every other algorithm):
    - Two concurrent requests can read the same counter value and both be
      admitted; over-admission under concurrency is expected.
    - The counter read is the value BEFORE this request is counted (an
      absent counter counts as 1).
    - The increment and its expiry run in a background task. Pending writes
      are tracked and ``flush()`` awaits them; call it (or
      ``RateLimiter.flush()``) before shutting down so no write is dropped.
    - A failed background write cannot reach the caller that already
      returned; it is logged at error level.

Usage:
    from sharedlimit.rate_limiter.algorithms import EventualWrite

    algorithm = EventualWrite(tokens=100, window_ms=1_000)
    result = await algorithm(store, "sharedlimit:tenant-7")
    ...
    await algorithm.flush()
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from sharedlimit.core.clock import current_millis
from sharedlimit.core.result import Failure, Result, Success
from sharedlimit.domain.enums import AlgorithmKind
from sharedlimit.domain.errors import StoreError
from sharedlimit.domain.value_objects import RatelimitResponse
from sharedlimit.rate_limiter.algorithms.replies import malformed_reply
from sharedlimit.rate_limiter.keys import build_key

if TYPE_CHECKING:
    from sharedlimit.domain.protocols import LoggerProtocol, StoreProtocol


@dataclass(frozen=True, slots=True)
class EventualWrite:
    """Fixed window with a detached increment.

    Attributes:
        tokens: Requests allowed per window.
        window_ms: Window length in milliseconds.
        logger: Logger for background write failures (container logger when
            omitted).

    Raises:
        ValueError: If tokens or window_ms is not positive.
    """

    tokens: int
    window_ms: int
    logger: LoggerProtocol | None = field(default=None, repr=False, compare=False)
    _pending: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False, compare=False
    )

    kind: ClassVar[AlgorithmKind] = AlgorithmKind.EVENTUAL_WRITE

    def __post_init__(self) -> None:
        if self.tokens <= 0:
            raise ValueError(f"tokens must be positive, got {self.tokens}")
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")

    @property
    def pending_writes(self) -> int:
        """Number of background increments not yet finished."""
        return len(self._pending)

    async def __call__(
        self,
        store: StoreProtocol,
        identifier: str,
        *,
        now_ms: int | None = None,
    ) -> Result[RatelimitResponse, StoreError]:
        """Decide from the current counter, then count in the background.

        Args:
            store: Shared store.
            identifier: Namespaced identifier (prefix already applied).
            now_ms: Override current time in epoch ms (for testing).

        Returns:
            Result with the decision, or the read's failure unchanged. A
            failed read schedules no write.
        """
        now = now_ms if now_ms is not None else current_millis()
        bucket = now // self.window_ms
        key = build_key(identifier, bucket)

        result = await store.get(key)
        match result:
            case Success(value=None):
                used = 1
            case Success(value=raw):
                try:
                    used = int(raw)
                except ValueError:
                    return malformed_reply("get", raw)
            case Failure():
                return result

        self._detach(self._record(store, key), key=key)

        return Success(
            value=RatelimitResponse(
                success=used <= self.tokens,
                limit=self.tokens,
                remaining=self.tokens - used,
                reset=(bucket + 1) * self.window_ms,
            )
        )

    async def flush(self) -> None:
        """Wait for every pending background increment to finish."""
        while self._pending:
            await asyncio.gather(*tuple(self._pending))

    def _detach(self, write: Coroutine[Any, Any, None], *, key: str) -> None:
        task = asyncio.create_task(write, name=f"eventual-write:{key}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _record(self, store: StoreProtocol, key: str) -> None:
        result = await store.incr(key)
        if isinstance(result, Success) and result.value == 1:
            result = await store.pexpire(key, self.window_ms)

        match result:
            case Failure(error=error):
                self._log().error(
                    "Eventual write failed",
                    key=key,
                    error_code=error.code.value,
                    error_message=error.message,
                )

    def _log(self) -> LoggerProtocol:
        if self.logger is not None:
            return self.logger
        from sharedlimit.core.container import get_logger

        return get_logger()
