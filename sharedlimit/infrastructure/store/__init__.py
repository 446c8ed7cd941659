"""Shared store adapters.

Exports:
    RedisStore: Redis implementation of StoreProtocol (Lua transactions).
"""

from sharedlimit.infrastructure.store.redis_store import RedisStore

__all__ = ["RedisStore"]
