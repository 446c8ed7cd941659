"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging: a constant message plus key-value
context. The rate limiter logs identifiers and keys, never store credentials.

Usage:
    from sharedlimit.core.container import get_logger
    from sharedlimit.domain.protocols import LoggerProtocol

    logger: LoggerProtocol = get_logger()
    logger.debug("Rate limit decision", key=key, success=False)

    scoped = logger.bind(algorithm="token_bucket")
    scoped.info("Rate limiter ready")  # algorithm auto-included
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Supports the five standard levels and context binding.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Constant, human-readable message.
            error: Optional exception; adapters add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with permanently bound context.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
