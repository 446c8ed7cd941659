"""Wall-clock helpers.

All quota arithmetic uses integer epoch milliseconds. Callers only need coarse
agreement on wall-clock time; ordering between callers comes from the store.
"""

from time import time


def current_millis() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time() * 1000)
