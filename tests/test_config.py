"""Tests for settings and logging configuration."""

import logging
from pathlib import Path

import pytest
from pythonjsonlogger.jsonlogger import JsonFormatter

from gymdesk.config import Settings, get_settings
from gymdesk.logging_config import build_logging_config, configure_logging


@pytest.fixture
def restore_logging():
    """Undo configure_logging so later tests can capture gymdesk logs."""
    logger = logging.getLogger("gymdesk")
    root = logging.getLogger()
    root_handlers, root_level = list(root.handlers), root.level
    yield
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    root.handlers[:] = root_handlers
    root.setLevel(root_level)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GYMDESK_DATA_DIR")
        settings = Settings.from_env()

        assert settings.db_filename == "gymdesk.db"
        assert settings.studio_weekly_limit == 250
        assert settings.member_weekly_limit == 1
        assert settings.log_format == "console"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GYMDESK_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("GYMDESK_STUDIO_WEEKLY_LIMIT", "120")
        monkeypatch.setenv("GYMDESK_LOG_LEVEL", "debug")
        monkeypatch.setenv("GYMDESK_LOG_FORMAT", "JSON")

        settings = Settings.from_env()

        assert settings.db_path == Path(tmp_path) / "gymdesk.db"
        assert settings.studio_weekly_limit == 120
        assert settings.log_level == "DEBUG"
        assert settings.log_level_value == logging.DEBUG
        assert settings.log_format == "json"

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("GYMDESK_MEMBER_WEEKLY_LIMIT", "two")

        with pytest.raises(ValueError, match="GYMDESK_MEMBER_WEEKLY_LIMIT"):
            Settings.from_env()

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("GYMDESK_LOG_FORMAT", "xml")

        with pytest.raises(ValueError, match="LOG_FORMAT"):
            Settings.from_env()

    def test_get_settings_is_cached(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("GYMDESK_PORT", "9000")

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().port == 9000


class TestLoggingConfig:
    """Tests for logging setup."""

    def test_build_uses_settings(self):
        config = build_logging_config(Settings(log_level="WARNING", log_format="json"))

        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["loggers"]["gymdesk"]["level"] == "WARNING"
        assert config["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"

    def test_configure_json_logging(self, restore_logging):
        logger = configure_logging(Settings(log_level="DEBUG", log_format="json"))

        assert logger.name == "gymdesk"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_configure_console_logging(self, restore_logging):
        logger = configure_logging(Settings())

        assert logger.level == logging.INFO
        assert not isinstance(logger.handlers[0].formatter, JsonFormatter)
