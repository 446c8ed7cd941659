"""Pytest configuration for sharedlimit tests.

This configuration ensures:
1. Async tests run under pytest-asyncio (auto mode)
2. Every test gets its own in-memory Redis server (fakeredis)
3. Settings and container singletons never leak between tests
"""

from unittest.mock import MagicMock

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio

from sharedlimit.core.config import get_settings
from sharedlimit.core.container import get_logger, get_store
from sharedlimit.infrastructure.store import RedisStore


@pytest.fixture(autouse=True)
def clear_singletons():
    """Reset cached settings and container singletons around each test."""
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_store.cache_clear()


# ============================================================================
# Store fixtures
# ============================================================================


@pytest_asyncio.fixture
async def redis_client():
    """Fresh fakeredis client backed by its own server.

    Uses ``decode_responses=False`` like the production pool so reply
    decoding in RedisStore is exercised.
    """
    client = fakeredis.aioredis.FakeRedis(
        server=fakeredis.FakeServer(), decode_responses=False
    )
    yield client
    await client.aclose()


@pytest.fixture
def store(redis_client):
    """RedisStore over the fakeredis client."""
    return RedisStore(redis_client=redis_client)


@pytest.fixture
def mock_logger():
    """Logger double implementing LoggerProtocol."""
    return MagicMock()
