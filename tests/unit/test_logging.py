"""Unit tests for logging setup."""

import logging

from userbase.config import get_settings
from userbase.infrastructure.logging.log_config import _parse_level, setup_logging


def test_category_levels_follow_settings(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL_SQL", "ERROR")
    monkeypatch.setenv("LOG_LEVEL_CONTAINERS", "DEBUG")
    get_settings.cache_clear()
    try:
        setup_logging()
        assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
        assert logging.getLogger("sqlalchemy.pool").level == logging.ERROR
        assert logging.getLogger("testcontainers").level == logging.DEBUG
        assert logging.getLogger().handlers
    finally:
        get_settings.cache_clear()


def test_parse_level_defaults_to_info():
    assert _parse_level("warning") == logging.WARNING
    assert _parse_level("bogus") == logging.INFO
