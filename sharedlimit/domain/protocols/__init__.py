"""Domain protocols (ports).

Usage:
    from sharedlimit.domain.protocols import LoggerProtocol, StoreProtocol
"""

from sharedlimit.domain.protocols.logger_protocol import LoggerProtocol
from sharedlimit.domain.protocols.store_protocol import StoreProtocol

__all__ = ["LoggerProtocol", "StoreProtocol"]
