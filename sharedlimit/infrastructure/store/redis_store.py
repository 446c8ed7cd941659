"""Redis adapter implementing StoreProtocol.

Wraps an async Redis client (``redis.asyncio.Redis`` compatible) and maps
every Redis exception to a StoreError at this boundary. Transactions are Lua
scripts shipped with EVALSHA: each program is loaded once, its SHA is cached,
and a flushed script cache (NOSCRIPT) triggers a single reload.

Error mapping:
    ConnectionError, TimeoutError  -> StoreUnavailableError
    ResponseError (incl. scripts)  -> StoreProtocolError
    Undecodable reply              -> StoreProtocolError

Nothing here retries a failed round trip and nothing fails open; the Failure
is returned to the algorithm, which returns it to its caller.

Note:
    Does NOT inherit from StoreProtocol (structural typing).
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    NoScriptError,
    RedisError,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)

from sharedlimit.core.enums import ErrorCode
from sharedlimit.core.result import Failure, Result, Success
from sharedlimit.domain.errors import (
    StoreError,
    StoreProtocolError,
    StoreUnavailableError,
)
from sharedlimit.domain.value_objects.transaction import Transaction


class RedisStore:
    """Redis implementation of StoreProtocol.

    Args:
        redis_client: Async Redis client. Either ``decode_responses`` setting
            works; replies are decoded here.

    Attributes:
        redis: The Redis client instance.
        _script_shas: Loaded script SHA per transaction name.
    """

    def __init__(self, *, redis_client: Redis) -> None:
        self.redis = redis_client
        self._script_shas: dict[str, str] = {}
        self._script_lock = asyncio.Lock()

    # ---------------------------------------------------------------------
    # StoreProtocol implementation
    # ---------------------------------------------------------------------
    async def get(self, key: str) -> Result[str | None, StoreError]:
        """Read a single value.

        Args:
            key: Store key.

        Returns:
            Result with the decoded value, None if absent, or StoreError.
        """
        try:
            raw = await self.redis.get(key)
        except RedisError as exc:
            return Failure(error=_map_redis_error("get", exc, key=key))
        return _decoded("get", raw, key=key)

    async def incr(self, key: str) -> Result[int, StoreError]:
        """Increment a counter, creating it at 1.

        Args:
            key: Store key.

        Returns:
            Result with the post-increment value, or StoreError.
        """
        try:
            value = await self.redis.incr(key)
        except RedisError as exc:
            return Failure(error=_map_redis_error("incr", exc, key=key))
        return Success(value=int(value))

    async def pexpire(self, key: str, ttl_ms: int) -> Result[bool, StoreError]:
        """Set a millisecond expiry on a key.

        Args:
            key: Store key.
            ttl_ms: Time to live in milliseconds.

        Returns:
            Result with True if set, False if the key does not exist.
        """
        try:
            applied = await self.redis.pexpire(key, ttl_ms)
        except RedisError as exc:
            return Failure(
                error=_map_redis_error("pexpire", exc, key=key, ttl_ms=ttl_ms)
            )
        return Success(value=bool(applied))

    async def hmget(
        self, key: str, *fields: str
    ) -> Result[list[str | None], StoreError]:
        """Read several hash fields at once.

        Args:
            key: Hash key.
            *fields: Field names.

        Returns:
            Result with one value per field (None for missing ones).
        """
        try:
            raw_values = await self.redis.hmget(key, list(fields))
        except RedisError as exc:
            return Failure(error=_map_redis_error("hmget", exc, key=key))

        values: list[str | None] = []
        for raw in raw_values:
            match _decoded("hmget", raw, key=key):
                case Success(value=value):
                    values.append(value)
                case Failure() as failure:
                    return failure
        return Success(value=values)

    async def hset(self, key: str, mapping: dict[str, Any]) -> Result[int, StoreError]:
        """Write several hash fields at once.

        Args:
            key: Hash key.
            mapping: Field name to value.

        Returns:
            Result with the number of newly created fields.
        """
        try:
            created = await self.redis.hset(key, mapping=mapping)
        except RedisError as exc:
            return Failure(error=_map_redis_error("hset", exc, key=key))
        return Success(value=int(created))

    async def transaction(
        self,
        program: Transaction,
        keys: Sequence[str],
        args: Sequence[int | float | str],
    ) -> Result[Any, StoreError]:
        """Execute a Lua program atomically via EVALSHA.

        Redis runs the script start-to-finish without interleaving any other
        command, which is what makes each decision race-free.

        Args:
            program: Lua program definition.
            keys: KEYS passed to the script (must match program.key_count).
            args: ARGV passed to the script.

        Returns:
            Result with the decoded script reply, or StoreError.
        """
        if len(keys) != program.key_count:
            return Failure(
                error=StoreProtocolError(
                    code=ErrorCode.STORE_PROTOCOL_ERROR,
                    message=(
                        f"Transaction '{program.name}' expects "
                        f"{program.key_count} keys, got {len(keys)}"
                    ),
                    operation="evalsha",
                    details={"program": program.name, "keys": list(keys)},
                )
            )

        try:
            sha = await self._ensure_script(program)
            try:
                reply = await self.redis.evalsha(sha, program.key_count, *keys, *args)
            except NoScriptError:
                # Script cache was flushed (SCRIPT FLUSH or restart); reload once.
                self._script_shas.pop(program.name, None)
                sha = await self._ensure_script(program)
                reply = await self.redis.evalsha(sha, program.key_count, *keys, *args)
        except RedisError as exc:
            return Failure(
                error=_map_redis_error(
                    "evalsha", exc, program=program.name, keys=list(keys)
                )
            )

        try:
            return Success(value=_decode_reply(reply))
        except UnicodeDecodeError as exc:
            return Failure(
                error=_malformed("evalsha", exc, program=program.name)
            )

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------
    async def aclose(self) -> None:
        """Close the underlying Redis client and its connections."""
        await self.redis.aclose()

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _ensure_script(self, program: Transaction) -> str:
        """Load a program into Redis and cache the SHA.

        Returns:
            str: Script SHA.
        """
        sha = self._script_shas.get(program.name)
        if sha:
            return sha
        async with self._script_lock:
            sha = self._script_shas.get(program.name)
            if sha:
                return sha
            loaded = await self.redis.script_load(program.script)
            sha = loaded.decode("ascii") if isinstance(loaded, bytes) else loaded
            self._script_shas[program.name] = sha
            return sha


def _decoded(
    operation: str, raw: bytes | str | None, **details: Any
) -> Result[str | None, StoreError]:
    """Decode a single bulk reply."""
    if raw is None or isinstance(raw, str):
        return Success(value=raw)
    try:
        return Success(value=raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        return Failure(error=_malformed(operation, exc, **details))


def _decode_reply(reply: Any) -> Any:
    """Recursively decode bytes inside a script reply."""
    if isinstance(reply, bytes):
        return reply.decode("utf-8")
    if isinstance(reply, list):
        return [_decode_reply(item) for item in reply]
    return reply


def _malformed(operation: str, exc: Exception, **details: Any) -> StoreProtocolError:
    return StoreProtocolError(
        code=ErrorCode.STORE_PROTOCOL_ERROR,
        message=f"Undecodable reply from store during {operation}",
        operation=operation,
        details={**details, "error": str(exc)},
    )


def _map_redis_error(operation: str, exc: RedisError, **details: Any) -> StoreError:
    """Map a redis-py exception onto the StoreProtocol error contract.

    Args:
        operation: Store primitive that failed.
        exc: Exception raised by redis-py.
        **details: Extra context (key, program, ...).

    Returns:
        StoreError: StoreUnavailableError for connection/timeout failures,
            StoreProtocolError for everything else.
    """
    context = {**details, "error": str(exc), "error_type": type(exc).__name__}
    if isinstance(exc, (RedisConnectionError, RedisTimeoutError)):
        return StoreUnavailableError(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=f"Store unavailable during {operation}",
            operation=operation,
            details=context,
        )
    if isinstance(exc, ResponseError):
        return StoreProtocolError(
            code=ErrorCode.STORE_PROTOCOL_ERROR,
            message=f"Store rejected {operation}: {exc}",
            operation=operation,
            details=context,
        )
    return StoreProtocolError(
        code=ErrorCode.STORE_PROTOCOL_ERROR,
        message=f"Unexpected store error during {operation}",
        operation=operation,
        details=context,
    )
