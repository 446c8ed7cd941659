"""Logging adapters.

Exports:
    ConsoleAdapter: structlog-backed implementation of LoggerProtocol.
"""

from sharedlimit.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
