"""Dependency factories.

Application-scoped singletons for the library's infrastructure:
- Logging (structlog console adapter)
- Shared store (Redis)

plus a factory for RateLimiter instances bound to those singletons. Imports of
infrastructure modules happen inside the factories so importing this module
stays cheap and free of import cycles.

Usage:
    from sharedlimit.core.container import get_rate_limiter
    from sharedlimit.rate_limiter import FixedWindow

    limiter = get_rate_limiter(FixedWindow(tokens=10, window_ms=60_000))
    result = await limiter.limit("user-123")
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from sharedlimit.core.config import get_settings

if TYPE_CHECKING:
    from sharedlimit.domain.protocols import LoggerProtocol, StoreProtocol
    from sharedlimit.rate_limiter.algorithms import Algorithm
    from sharedlimit.rate_limiter.service import RateLimiter


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development/production: ConsoleAdapter (human-readable)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from sharedlimit.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=settings.is_testing,
        level=settings.log_level_number,
    )


@lru_cache()
def get_store() -> "StoreProtocol":
    """Get shared store singleton (app-scoped).

    Returns RedisStore over a connection pool shared by every limiter the
    process creates. A failed round trip is never retried here; the Failure
    reaches the caller.

    Returns:
        Store implementing StoreProtocol.
    """
    from redis.asyncio import ConnectionPool, Redis

    from sharedlimit.infrastructure.store import RedisStore

    settings = get_settings()
    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=False,
        socket_connect_timeout=settings.redis_connect_timeout,
        socket_timeout=settings.redis_socket_timeout,
        socket_keepalive=True,
    )
    redis_client = Redis(connection_pool=pool)
    return RedisStore(redis_client=redis_client)


# ============================================================================
# Factories
# ============================================================================


def get_rate_limiter(
    algorithm: "Algorithm",
    *,
    prefix: str | None = None,
) -> "RateLimiter":
    """Create a RateLimiter bound to the shared store and logger.

    Args:
        algorithm: Algorithm value (FixedWindow, SlidingWindow, ...).
        prefix: Key prefix. Defaults to ``settings.ratelimit_prefix``.

    Returns:
        RateLimiter: New facade instance.
    """
    from sharedlimit.rate_limiter.service import RateLimiter

    return RateLimiter(
        store=get_store(),
        algorithm=algorithm,
        prefix=prefix if prefix is not None else get_settings().ratelimit_prefix,
        logger=get_logger(),
    )
