"""Core errors package.

Usage:
    from sharedlimit.core.errors import DomainError, ValidationError
"""

from sharedlimit.core.errors.common_errors import ValidationError
from sharedlimit.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
]
