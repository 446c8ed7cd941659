"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables
prefixed with ``SHAREDLIMIT_``. Durations are plain milliseconds; nothing here
parses human-readable duration strings.

Usage:
    from sharedlimit.core.config import get_settings

    settings = get_settings()
    redis_url = settings.redis_url
    prefix = settings.ratelimit_prefix
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sharedlimit.core.enums import Environment

DEFAULT_PREFIX = "sharedlimit"
"""Key prefix used when none is configured."""

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """
    Library settings (flat structure).

    Configuration precedence:
        1. Environment variables (SHAREDLIMIT_*)
        2. Default values
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Shared store (Redis)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (e.g., redis://host:port/db)",
    )
    redis_max_connections: int = Field(
        default=20,
        description="Connection pool size shared by all rate limit calls",
    )
    redis_socket_timeout: float = Field(
        default=5.0,
        description="Seconds to wait for a Redis reply before failing the round trip",
    )
    redis_connect_timeout: float = Field(
        default=5.0,
        description="Seconds to wait while opening a Redis connection",
    )

    # Rate limiting
    ratelimit_prefix: str = Field(
        default=DEFAULT_PREFIX,
        description="Prefix joined in front of every identifier",
    )

    model_config = SettingsConfigDict(
        env_prefix="SHAREDLIMIT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Level name in any case.

        Returns:
            str: Upper-cased level name.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("ratelimit_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """
        Reject an empty key prefix.

        Args:
            v: Configured prefix.

        Returns:
            str: The prefix, unchanged.

        Raises:
            ValueError: If the prefix is empty.
        """
        if not v:
            raise ValueError("ratelimit_prefix must not be empty")
        return v

    @property
    def log_level_number(self) -> int:
        """Numeric logging level matching ``log_level``."""
        return logging.getLevelName(self.log_level)

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing or CI environment.

        Returns:
            bool: True for TESTING and CI, False otherwise.
        """
        return self.environment in (Environment.TESTING, Environment.CI)

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Singleton settings loaded from the environment.
    """
    return Settings()
