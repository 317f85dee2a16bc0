"""
Tests for settings and logging setup.
"""

from datetime import datetime, timezone

import pytest
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from zeugnis.config.logging_config import get_logger, setup_structured_logging
from zeugnis.config.settings import Settings, get_settings, reload_settings
from zeugnis.core.timestamps import is_valid_timestamp, to_iso
from conftest import T0


def test_defaults():
    settings = Settings()

    assert settings.max_document_bytes == 5 * 1024 * 1024
    assert settings.max_events_per_competency == 1000
    assert settings.storage_quota_bytes is None
    assert settings.min_timestamp_ms == 1_577_836_800_000


def test_env_override(monkeypatch):
    monkeypatch.setenv("ZEUGNIS_MAX_DOCUMENT_BYTES", "2048")
    monkeypatch.setenv("ZEUGNIS_LOG_LEVEL", "debug")

    settings = reload_settings()

    assert settings.max_document_bytes == 2048
    assert settings.log_level == "DEBUG"
    assert get_settings() is settings


@pytest.mark.parametrize("kwargs", [
    {"log_level": "LOUD"},
    {"storage_quota_bytes": 0},
    {"max_document_bytes": 0},
    {
        "min_timestamp": datetime(2031, 1, 1, tzinfo=timezone.utc),
        "max_timestamp": datetime(2030, 1, 1, tzinfo=timezone.utc),
    },
])
def test_invalid_settings(kwargs):
    with pytest.raises(PydanticValidationError):
        Settings(**kwargs)


def test_timestamp_window_follows_settings(monkeypatch):
    assert is_valid_timestamp(T0)

    monkeypatch.setenv("ZEUGNIS_MIN_TIMESTAMP", "2025-01-01T00:00:00Z")
    reload_settings()

    assert not is_valid_timestamp(T0)


def test_to_iso():
    assert to_iso(T0) == "2024-06-10T06:13:20.000Z"


def test_logger_binds_module():
    records = []
    setup_structured_logging(level="DEBUG")
    handler_id = logger.add(records.append, format="{extra[module]} {message}")
    try:
        get_logger("zeugnis.test").info("hello")
    finally:
        logger.remove(handler_id)

    assert records[-1].strip() == "zeugnis.test hello"
