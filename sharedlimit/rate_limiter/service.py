"""Rate limiter facade.

Binds a shared store, one algorithm, and a key prefix. ``limit`` namespaces
the identifier and delegates one decision to the algorithm;
``block_until_ready`` polls ``limit`` until it succeeds or a deadline passes.

Architecture:
    caller -> RateLimiter.limit(identifier)
           -> "prefix:identifier"
           -> algorithm(store, key)      (one atomic store round trip)
           -> Result[RatelimitResponse, StoreError]

The facade holds no mutable state of its own: every counter lives in the
store, so one instance can serve any number of concurrent callers.

Usage:
    from sharedlimit.core.container import get_store
    from sharedlimit.rate_limiter import RateLimiter, SlidingWindow

    limiter = RateLimiter(
        store=get_store(),
        algorithm=SlidingWindow(tokens=10, window_ms=10_000),
    )

    result = await limiter.limit(client_ip)
    match result:
        case Success(value=response) if not response.success:
            raise HTTPException(429, headers=response.to_headers())
        case Failure(error=error):
            ...  # fail-open or fail-closed is the caller's call
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import TYPE_CHECKING

from sharedlimit.core.clock import current_millis
from sharedlimit.core.config import DEFAULT_PREFIX
from sharedlimit.core.enums import ErrorCode
from sharedlimit.core.errors import DomainError, ValidationError
from sharedlimit.core.result import Failure, Result, Success
from sharedlimit.domain.errors import RatelimitInvariantError, StoreError
from sharedlimit.domain.value_objects import RatelimitResponse
from sharedlimit.rate_limiter.algorithms import EventualWrite
from sharedlimit.rate_limiter.keys import build_key

if TYPE_CHECKING:
    from sharedlimit.domain.protocols import LoggerProtocol, StoreProtocol
    from sharedlimit.rate_limiter.algorithms import Algorithm


class RateLimiter:
    """Facade over one rate limiting algorithm.

    Args:
        store: Shared store implementing StoreProtocol.
        algorithm: Algorithm chosen at configuration time.
        prefix: Prepended to every identifier. Defaults to DEFAULT_PREFIX.
        logger: Structured logger. Defaults to the container logger.
    """

    def __init__(
        self,
        *,
        store: StoreProtocol,
        algorithm: Algorithm,
        prefix: str = DEFAULT_PREFIX,
        logger: LoggerProtocol | None = None,
    ) -> None:
        if logger is None:
            from sharedlimit.core.container import get_logger

            logger = get_logger()
        self._store = store
        self._algorithm = algorithm
        self._prefix = prefix
        self._logger = logger

    @property
    def algorithm(self) -> Algorithm:
        """The configured algorithm."""
        return self._algorithm

    @property
    def prefix(self) -> str:
        """Key prefix joined in front of every identifier."""
        return self._prefix

    async def limit(
        self,
        identifier: str,
        *,
        now_ms: int | None = None,
    ) -> Result[RatelimitResponse, StoreError]:
        """Decide whether one request for ``identifier`` may proceed.

        Args:
            identifier: Quota subject (user id, API key, IP address...). Use a
                constant string to limit globally.
            now_ms: Override current time in epoch ms (for testing).

        Returns:
            Result[RatelimitResponse, StoreError]:
                - Success(RatelimitResponse) with the decision
                - Failure(StoreError) exactly as the store returned it
        """
        key = build_key(self._prefix, identifier)
        start_time = perf_counter()

        result = await self._algorithm(self._store, key, now_ms=now_ms)

        elapsed_ms = (perf_counter() - start_time) * 1000
        match result:
            case Success(value=response):
                self._logger.debug(
                    "Rate limit decision",
                    key=key,
                    algorithm=self._algorithm.kind.value,
                    success=response.success,
                    remaining=response.remaining,
                    reset=response.reset,
                    elapsed_ms=round(elapsed_ms, 3),
                )
            case Failure(error=error):
                self._logger.warning(
                    "Rate limit store failure",
                    key=key,
                    algorithm=self._algorithm.kind.value,
                    error_code=error.code.value,
                    error_message=error.message,
                    elapsed_ms=round(elapsed_ms, 3),
                )
        return result

    async def block_until_ready(
        self,
        identifier: str,
        timeout_ms: int,
    ) -> Result[RatelimitResponse, DomainError]:
        """Wait until a request for ``identifier`` may proceed or time runs out.

        Polls ``limit`` strictly sequentially. Between polls it sleeps until
        the earlier of the response's ``reset`` and the deadline, so it wakes
        when capacity can next exist and never busy-polls.

        Args:
            identifier: Quota subject.
            timeout_ms: Maximum time to wait in milliseconds; must be positive.

        Returns:
            Result[RatelimitResponse, DomainError]:
                - Success with the first successful response
                - Success with the last denied response once the deadline passed
                - Failure(ValidationError) if timeout_ms <= 0 (no store access)
                - Failure(StoreError) from the first failed round trip

        Raises:
            RatelimitInvariantError: If an algorithm denies with ``reset == 0``.
        """
        if timeout_ms <= 0:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_TIMEOUT,
                    message="timeout must be positive",
                    field="timeout_ms",
                    details={"timeout_ms": timeout_ms},
                )
            )

        deadline = current_millis() + timeout_ms
        while True:
            result = await self.limit(identifier)
            if isinstance(result, Failure):
                return result

            response = result.value
            if response.success:
                return result
            if response.reset == 0:
                raise RatelimitInvariantError(
                    f"{self._algorithm.kind.value} denied '{identifier}' "
                    "without a reset time"
                )

            wait_ms = min(response.reset, deadline) - current_millis()
            self._logger.debug(
                "Waiting for rate limit reset",
                identifier=identifier,
                wait_ms=wait_ms,
                reset=response.reset,
                deadline=deadline,
            )
            await asyncio.sleep(max(wait_ms, 0) / 1000)

            if current_millis() >= deadline:
                self._logger.info(
                    "Rate limit wait timed out",
                    identifier=identifier,
                    timeout_ms=timeout_ms,
                    remaining=response.remaining,
                )
                return result

    async def flush(self) -> None:
        """Wait for background writes the algorithm still has in flight.

        Only EventualWrite detaches work; for the atomic algorithms this
        returns immediately. Call before shutdown.
        """
        match self._algorithm:
            case EventualWrite():
                await self._algorithm.flush()
