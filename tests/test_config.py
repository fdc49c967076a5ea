"""Tests for environment-based settings."""

import pytest

from card_manager.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from card_manager.errors import ConfigurationError


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.api_token is None
        assert settings.model == DEFAULT_MODEL
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.poll_interval == 1.0
        assert settings.max_poll_attempts == 120
        assert settings.max_new_tokens == 256
        assert settings.cors_origins == ["*"]
        assert settings.log_level == "INFO"

    def test_overrides(self):
        settings = Settings.from_env({
            "REPLICATE_API_TOKEN": "r8_abc",
            "REPLICATE_MODEL": "org/model",
            "REPLICATE_BASE_URL": "http://localhost:5000/v1/",
            "CARD_MANAGER_POLL_INTERVAL": "0.25",
            "CARD_MANAGER_MAX_POLL_ATTEMPTS": "0",
            "CARD_MANAGER_MAX_NEW_TOKENS": "512",
            "CARD_MANAGER_CORS_ORIGINS": "http://a.test, http://b.test",
            "CARD_MANAGER_LOG_LEVEL": "debug",
        })

        assert settings.api_token == "r8_abc"
        assert settings.model == "org/model"
        assert settings.base_url == "http://localhost:5000/v1"
        assert settings.poll_interval == 0.25
        assert settings.max_poll_attempts == 0
        assert settings.max_new_tokens == 512
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.log_level == "DEBUG"

    def test_blank_token_is_missing(self):
        assert Settings.from_env({"REPLICATE_API_TOKEN": ""}).api_token is None

    @pytest.mark.parametrize(
        "key,value",
        [
            ("CARD_MANAGER_POLL_INTERVAL", "soon"),
            ("CARD_MANAGER_MAX_POLL_ATTEMPTS", "1.5"),
            ("CARD_MANAGER_MAX_NEW_TOKENS", "-1"),
        ],
    )
    def test_invalid_numbers(self, key, value):
        with pytest.raises(ConfigurationError, match=key):
            Settings.from_env({key: value})

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError, match="log level"):
            Settings.from_env({"CARD_MANAGER_LOG_LEVEL": "LOUD"})
