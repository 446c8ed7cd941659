"""Core enums package.

Usage:
    from sharedlimit.core.enums import ErrorCode, Environment
"""

from sharedlimit.core.enums.environment import Environment
from sharedlimit.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
