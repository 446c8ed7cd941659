"""Domain enums package.

Usage:
    from sharedlimit.domain.enums import AlgorithmKind
"""

from sharedlimit.domain.enums.algorithm_kind import AlgorithmKind

__all__ = ["AlgorithmKind"]
