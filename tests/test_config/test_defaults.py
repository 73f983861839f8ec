"""Tests for default configuration values."""

from goosechat.config.defaults import (
    DEFAULT_MAX_PROCESSES,
    DEFAULT_MAX_TURNS,
    DEFAULT_TIMEOUT_MINUTES,
    get_defaults,
)
from goosechat.config.schema import Settings


class TestDefaults:
    def test_get_defaults_keys(self):
        defaults = get_defaults()
        assert defaults["timeout_minutes"] == DEFAULT_TIMEOUT_MINUTES
        assert defaults["max_turns"] == DEFAULT_MAX_TURNS
        assert defaults["max_processes"] == DEFAULT_MAX_PROCESSES

    def test_get_defaults_returns_fresh_dict(self):
        first = get_defaults()
        first["max_turns"] = 1
        assert get_defaults()["max_turns"] == DEFAULT_MAX_TURNS

    def test_defaults_validate(self):
        settings = Settings.model_validate(get_defaults())
        assert settings.cli_path is None
        assert settings.timeout_seconds == DEFAULT_TIMEOUT_MINUTES * 60
        assert not settings.locator_configured
