"""Store protocol (port) for the shared atomic key-value store.

Every caller coordinates only through this store, so the rate limiter's
correctness rests on one guarantee: ``transaction`` runs its program
indivisibly with respect to every other program touching the same keys. No
client-side lock is used or needed.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (RedisStore)
- Algorithms depend only on the protocol

Usage:
    from sharedlimit.domain.protocols import StoreProtocol

    async def count(store: StoreProtocol, key: str) -> int:
        result = await store.get(key)
        match result:
            case Success(value=raw):
                return int(raw or 0)
            case Failure():
                ...
"""

from collections.abc import Sequence
from typing import Any, Protocol

from sharedlimit.core.result import Result
from sharedlimit.domain.errors import StoreError
from sharedlimit.domain.value_objects.transaction import Transaction


class StoreProtocol(Protocol):
    """Shared atomic store consumed by every algorithm.

    Error Handling:
        Every primitive returns a Result. Failure carries either
        StoreUnavailableError (network, timeout) or StoreProtocolError
        (error reply, malformed reply). Implementations never retry.

    Concurrency:
        A single instance is shared by all concurrent calls and must be safe
        for concurrent use (connection pooling is the adapter's concern).
    """

    async def get(self, key: str) -> Result[str | None, StoreError]:
        """Point read without side effects.

        Args:
            key: Store key.

        Returns:
            Result with the decoded value, or None when the key is absent.
        """
        ...

    async def incr(self, key: str) -> Result[int, StoreError]:
        """Atomically increment an integer counter.

        Args:
            key: Store key; created at 1 when absent.

        Returns:
            Result with the post-increment value.
        """
        ...

    async def pexpire(self, key: str, ttl_ms: int) -> Result[bool, StoreError]:
        """Set or refresh a key's expiry. Idempotent.

        Args:
            key: Store key.
            ttl_ms: Time to live in milliseconds.

        Returns:
            Result with True if the expiry was set, False if the key is absent.
        """
        ...

    async def hmget(
        self, key: str, *fields: str
    ) -> Result[list[str | None], StoreError]:
        """Atomically read several hash fields.

        Args:
            key: Hash key.
            *fields: Field names.

        Returns:
            Result with one decoded value (or None) per requested field.
        """
        ...

    async def hset(self, key: str, mapping: dict[str, Any]) -> Result[int, StoreError]:
        """Atomically write several hash fields.

        Args:
            key: Hash key.
            mapping: Field name to value.

        Returns:
            Result with the number of newly created fields.
        """
        ...

    async def transaction(
        self,
        program: Transaction,
        keys: Sequence[str],
        args: Sequence[int | float | str],
    ) -> Result[Any, StoreError]:
        """Run a program as one atomic unit against the named keys.

        Args:
            program: Program to execute; ``len(keys)`` must equal
                ``program.key_count``.
            keys: Keys the program reads and writes.
            args: Extra program arguments.

        Returns:
            Result with the program's reply (integers, or lists of integers
            for the programs in this package).
        """
        ...
