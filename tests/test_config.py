"""Tests for environment settings and logging helpers."""

import logging
from pathlib import Path

from spendlite import logging_setup
from spendlite.config import Settings


def test_settings_defaults():
    settings = Settings.from_env({})
    assert settings.data_dir == Path("data")
    assert settings.env_name == "prod"
    assert settings.allowed_origins == ()
    assert not settings.is_development


def test_settings_from_environment():
    settings = Settings.from_env(
        {
            "SPENDLITE_DATA_DIR": "/tmp/ledger",
            "SPENDLITE_ENV": "Development",
            "SPENDLITE_ALLOWED_ORIGINS": "http://a.example, ,http://b.example",
            "SPENDLITE_LOG_LEVEL": "debug",
        }
    )
    assert settings.data_dir == Path("/tmp/ledger")
    assert settings.is_development
    assert settings.allowed_origins == ("http://a.example", "http://b.example")
    assert settings.log_level == "debug"


def test_parse_level(monkeypatch):
    assert logging_setup._parse_level("warning") == logging.WARNING
    assert logging_setup._parse_level("15") == 15
    assert logging_setup._parse_level(logging.ERROR) == logging.ERROR
    monkeypatch.setenv("SPENDLITE_LOG_LEVEL", "DEBUG")
    assert logging_setup._parse_level(None) == logging.DEBUG


def test_get_logger_is_namespaced():
    logger = logging_setup.get_logger("spendlite.store")
    assert logger.name == "spendlite.store"
    assert logging.getLogger("spendlite").handlers
