"""Core shared kernel.

Foundational utilities used across all layers:
- Result types for railway-oriented programming
- Base error classes carried by Failure results
- Error codes and environment enums

The core module has NO dependencies on other sharedlimit layers.
"""

from sharedlimit.core.enums import ErrorCode
from sharedlimit.core.errors import DomainError, ValidationError
from sharedlimit.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
    "ValidationError",
]
