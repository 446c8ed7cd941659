"""Store key shaping.

Keys are ``prefix:identifier`` for the facade and ``...:bucket`` for the
window-based algorithms. The bucket index is always the last segment and
never contains the delimiter, so for a fixed prefix two different
identifiers cannot produce the same key.
"""

KEY_DELIMITER = ":"


def build_key(*parts: str | int) -> str:
    """Join key parts with the delimiter.

    Args:
        *parts: Prefix, identifier, bucket index, ...

    Returns:
        str: The joined key, e.g. ``"sharedlimit:user-1:28333333"``.
    """
    return KEY_DELIMITER.join(str(part) for part in parts)
