"""Unit tests for Settings and get_settings().

Tests cover:
- Defaults when no SHAREDLIMIT_* variables are set
- Environment variable overrides
- log_level and ratelimit_prefix validation
- Environment helper properties
- Singleton caching
"""

import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from sharedlimit.core.config import DEFAULT_PREFIX, Settings, get_settings
from sharedlimit.core.enums import Environment


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.log_level == "INFO"
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.redis_max_connections == 20
        assert settings.ratelimit_prefix == DEFAULT_PREFIX

    def test_default_prefix_value(self):
        assert DEFAULT_PREFIX == "sharedlimit"


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test SHAREDLIMIT_* overrides."""

    def test_reads_prefixed_variables(self):
        env = {
            "SHAREDLIMIT_ENVIRONMENT": "production",
            "SHAREDLIMIT_LOG_LEVEL": "debug",
            "SHAREDLIMIT_REDIS_URL": "redis://cache:6380/2",
            "SHAREDLIMIT_REDIS_SOCKET_TIMEOUT": "0.5",
            "SHAREDLIMIT_RATELIMIT_PREFIX": "api",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.environment == Environment.PRODUCTION
        assert settings.log_level == "DEBUG"
        assert settings.redis_url == "redis://cache:6380/2"
        assert settings.redis_socket_timeout == 0.5
        assert settings.ratelimit_prefix == "api"

    def test_unprefixed_variables_are_ignored(self):
        with patch.dict(os.environ, {"REDIS_URL": "redis://other:1/0"}, clear=True):
            settings = Settings()

        assert settings.redis_url == "redis://localhost:6379/0"

    def test_invalid_log_level_rejected(self):
        with patch.dict(os.environ, {"SHAREDLIMIT_LOG_LEVEL": "verbose"}, clear=True):
            with pytest.raises(PydanticValidationError, match="log_level"):
                Settings()

    def test_empty_prefix_rejected(self):
        with patch.dict(os.environ, {"SHAREDLIMIT_RATELIMIT_PREFIX": ""}, clear=True):
            with pytest.raises(PydanticValidationError, match="ratelimit_prefix"):
                Settings()


@pytest.mark.unit
class TestSettingsProperties:
    """Test derived properties."""

    @pytest.mark.parametrize(
        ("environment", "is_testing", "is_production"),
        [
            (Environment.DEVELOPMENT, False, False),
            (Environment.TESTING, True, False),
            (Environment.CI, True, False),
            (Environment.PRODUCTION, False, True),
        ],
    )
    def test_environment_flags(self, environment, is_testing, is_production):
        settings = Settings(environment=environment)

        assert settings.is_testing is is_testing
        assert settings.is_production is is_production

    def test_log_level_number(self):
        settings = Settings(log_level="warning")

        assert settings.log_level_number == logging.WARNING


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() caching."""

    def test_returns_same_instance(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads_environment(self):
        with patch.dict(os.environ, {"SHAREDLIMIT_RATELIMIT_PREFIX": "one"}):
            get_settings.cache_clear()
            assert get_settings().ratelimit_prefix == "one"

        with patch.dict(os.environ, {"SHAREDLIMIT_RATELIMIT_PREFIX": "two"}):
            get_settings.cache_clear()
            assert get_settings().ratelimit_prefix == "two"
