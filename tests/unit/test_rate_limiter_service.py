"""Unit tests for the RateLimiter facade.

Tests cover:
- limit(): prefixing, delegation, pass-through of store failures, logging
- block_until_ready(): validation, polling, deadline handling, invariant check
- flush(): delegation to algorithms with background writes

Architecture:
- Scripted algorithm doubles and a fake clock for deterministic timing
- fakeredis for end-to-end checks with real algorithms
"""

from unittest.mock import AsyncMock, patch

import pytest

from sharedlimit.core.enums import ErrorCode
from sharedlimit.core.errors import ValidationError
from sharedlimit.core.result import Failure, Success
from sharedlimit.domain.enums import AlgorithmKind
from sharedlimit.domain.errors import RatelimitInvariantError, StoreUnavailableError
from sharedlimit.domain.value_objects import RatelimitResponse
from sharedlimit.rate_limiter import EventualWrite, FixedWindow, RateLimiter

START = 1_700_000_000_000


def _response(*, success: bool, reset: int, remaining: int = 0) -> Success:
    return Success(
        value=RatelimitResponse(
            success=success, limit=1, remaining=remaining, reset=reset
        )
    )


class ScriptedAlgorithm:
    """Algorithm double returning queued results in order."""

    kind = AlgorithmKind.FIXED_WINDOW

    def __init__(self, *results):
        self.results = list(results)
        self.identifiers: list[str] = []

    async def __call__(self, store, identifier, *, now_ms=None):
        self.identifiers.append(identifier)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class FakeClock:
    """Millisecond clock advanced only by sleep()."""

    def __init__(self, now: int) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def millis(self) -> int:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += round(seconds * 1000)


@pytest.fixture
def clock():
    fake = FakeClock(START)
    with (
        patch("sharedlimit.rate_limiter.service.current_millis", fake.millis),
        patch("sharedlimit.rate_limiter.service.asyncio.sleep", fake.sleep),
    ):
        yield fake


# ============================================================================
# limit()
# ============================================================================


@pytest.mark.unit
class TestLimit:
    """Test single decisions through the facade."""

    async def test_prefixes_identifier(self, mock_logger):
        algorithm = ScriptedAlgorithm(_response(success=True, reset=START))
        limiter = RateLimiter(
            store=AsyncMock(), algorithm=algorithm, prefix="api", logger=mock_logger
        )

        await limiter.limit("user-1")

        assert algorithm.identifiers == ["api:user-1"]

    async def test_default_prefix(self, mock_logger):
        algorithm = ScriptedAlgorithm(_response(success=True, reset=START))
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        await limiter.limit("user-1")

        assert limiter.prefix == "sharedlimit"
        assert algorithm.identifiers == ["sharedlimit:user-1"]

    async def test_returns_algorithm_result_and_logs_debug(self, mock_logger):
        decision = _response(success=False, reset=START + 10, remaining=-1)
        limiter = RateLimiter(
            store=AsyncMock(),
            algorithm=ScriptedAlgorithm(decision),
            logger=mock_logger,
        )

        result = await limiter.limit("user-1")

        assert result is decision
        mock_logger.debug.assert_called_once()
        assert mock_logger.debug.call_args.args[0] == "Rate limit decision"
        assert mock_logger.debug.call_args.kwargs["key"] == "sharedlimit:user-1"
        assert mock_logger.debug.call_args.kwargs["success"] is False

    async def test_store_failure_passed_through_and_logged(self, mock_logger):
        failure = Failure(
            error=StoreUnavailableError(
                code=ErrorCode.STORE_UNAVAILABLE,
                message="Store unavailable during evalsha",
                operation="evalsha",
            )
        )
        limiter = RateLimiter(
            store=AsyncMock(),
            algorithm=ScriptedAlgorithm(failure),
            logger=mock_logger,
        )

        result = await limiter.limit("user-1")

        assert result is failure
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["error_code"] == "store_unavailable"

    async def test_end_to_end_with_fixed_window(self, store, mock_logger):
        limiter = RateLimiter(
            store=store,
            algorithm=FixedWindow(tokens=2, window_ms=60_000),
            logger=mock_logger,
        )

        results = [await limiter.limit("user-1", now_ms=START) for _ in range(3)]

        assert [r.value.success for r in results] == [True, True, False]


# ============================================================================
# block_until_ready()
# ============================================================================


@pytest.mark.unit
class TestBlockUntilReady:
    """Test the blocking wait."""

    @pytest.mark.parametrize("timeout_ms", [0, -5])
    async def test_non_positive_timeout_rejected_without_store_access(
        self, mock_logger, timeout_ms
    ):
        store = AsyncMock()
        limiter = RateLimiter(
            store=store,
            algorithm=FixedWindow(tokens=1, window_ms=1000),
            logger=mock_logger,
        )

        result = await limiter.block_until_ready("user-1", timeout_ms)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ValidationError)
        assert result.error.code == ErrorCode.INVALID_TIMEOUT
        assert result.error.field == "timeout_ms"
        assert store.mock_calls == []

    async def test_returns_immediately_when_allowed(self, clock, mock_logger):
        allowed = _response(success=True, reset=START + 1000, remaining=4)
        algorithm = ScriptedAlgorithm(allowed)
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        result = await limiter.block_until_ready("user-1", 500)

        assert result is allowed
        assert clock.sleeps == []
        assert len(algorithm.identifiers) == 1

    async def test_times_out_before_distant_reset(self, clock, mock_logger):
        denied = _response(success=False, reset=START + 5000)
        algorithm = ScriptedAlgorithm(denied)
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        result = await limiter.block_until_ready("user-1", 100)

        assert result is denied
        assert result.value.success is False
        assert clock.sleeps == [0.1]
        assert clock.now == START + 100
        assert len(algorithm.identifiers) == 1
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "Rate limit wait timed out"

    async def test_waits_until_reset_then_succeeds(self, clock, mock_logger):
        allowed = _response(success=True, reset=START + 1300, remaining=0)
        algorithm = ScriptedAlgorithm(
            _response(success=False, reset=START + 300), allowed
        )
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        result = await limiter.block_until_ready("user-1", 1000)

        assert result is allowed
        assert clock.sleeps == [0.3]
        assert len(algorithm.identifiers) == 2

    async def test_polls_sequentially_until_deadline(self, clock, mock_logger):
        algorithm = ScriptedAlgorithm(
            _response(success=False, reset=START + 200),
            _response(success=False, reset=START + 400),
            _response(success=False, reset=START + 5000),
        )
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        result = await limiter.block_until_ready("user-1", 500)

        assert result.value.success is False
        assert clock.sleeps == [0.2, 0.2, 0.1]
        assert clock.now == START + 500
        assert len(algorithm.identifiers) == 3

    async def test_store_failure_returned_unchanged(self, clock, mock_logger):
        failure = Failure(
            error=StoreUnavailableError(
                code=ErrorCode.STORE_UNAVAILABLE,
                message="Store unavailable during evalsha",
                operation="evalsha",
            )
        )
        algorithm = ScriptedAlgorithm(
            _response(success=False, reset=START + 100), failure
        )
        limiter = RateLimiter(store=AsyncMock(), algorithm=algorithm, logger=mock_logger)

        result = await limiter.block_until_ready("user-1", 1000)

        assert result is failure

    async def test_denial_without_reset_raises(self, clock, mock_logger):
        limiter = RateLimiter(
            store=AsyncMock(),
            algorithm=ScriptedAlgorithm(_response(success=False, reset=0)),
            logger=mock_logger,
        )

        with pytest.raises(RatelimitInvariantError, match="without a reset time"):
            await limiter.block_until_ready("user-1", 1000)

        assert clock.sleeps == []

    async def test_end_to_end_waits_for_next_window(self, store, mock_logger):
        limiter = RateLimiter(
            store=store,
            algorithm=FixedWindow(tokens=1, window_ms=50),
            logger=mock_logger,
        )
        await limiter.limit("user-1")

        result = await limiter.block_until_ready("user-1", 2000)

        assert isinstance(result, Success)
        assert result.value.success is True


# ============================================================================
# flush()
# ============================================================================


@pytest.mark.unit
class TestFlush:
    async def test_waits_for_eventual_writes(self, store, redis_client, mock_logger):
        algorithm = EventualWrite(tokens=5, window_ms=60_000, logger=mock_logger)
        limiter = RateLimiter(store=store, algorithm=algorithm, logger=mock_logger)

        await limiter.limit("tenant-7", now_ms=START)
        await limiter.flush()

        assert algorithm.pending_writes == 0
        key = f"sharedlimit:tenant-7:{START // 60_000}"
        assert await redis_client.get(key) == b"1"

    async def test_no_op_for_atomic_algorithms(self, store, mock_logger):
        limiter = RateLimiter(
            store=store,
            algorithm=FixedWindow(tokens=5, window_ms=60_000),
            logger=mock_logger,
        )

        await limiter.flush()
