"""Atomic store program value object.

A Transaction is a read-decide-write sequence the shared store executes as
one indivisible unit against a fixed set of keys. For Redis it is a Lua
script; the store adapter owns how it is shipped and cached.

Usage:
    from sharedlimit.domain.value_objects import Transaction

    INCREMENT = Transaction(
        name="fixed_window",
        key_count=1,
        script='return redis.call("INCR", KEYS[1])',
    )
    result = await store.transaction(INCREMENT, keys=[key], args=[])
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class Transaction:
    """Program executed atomically by the shared store.

    Attributes:
        name: Stable program name (used for logging and script caching).
        script: Program body in the store's server-side language.
        key_count: Number of keys the program touches; callers must pass
            exactly this many keys.

    Raises:
        ValueError: If name or script is empty, or key_count < 1.
    """

    name: str
    script: str
    key_count: int = 1

    def __post_init__(self) -> None:
        """Validate program definition.

        Raises:
            ValueError: If any field is invalid.
        """
        if not self.name:
            raise ValueError("Transaction name must not be empty")
        if not self.script.strip():
            raise ValueError(f"Transaction '{self.name}' has an empty script")
        if self.key_count < 1:
            raise ValueError(
                f"Transaction '{self.name}' must touch at least one key, "
                f"got key_count={self.key_count}"
            )
