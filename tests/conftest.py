"""
Shared fixtures.
"""

import pytest

from zeugnis.config.settings import get_settings
from zeugnis.storage.class_store import ClassStore
from zeugnis.storage.file_store import FileStorage, MemoryStorage

# 2024-06-10, inside the plausible date window
T0 = 1_718_000_000_000


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Isolate every test from the environment and the settings cache."""
    monkeypatch.setenv("ZEUGNIS_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def file_storage(tmp_path):
    return FileStorage(tmp_path / "store")


@pytest.fixture
def store(memory_storage):
    return ClassStore(memory_storage)


def events(*pairs):
    """Build raw event dicts from (rating, timestamp) pairs."""
    return [{"rating": r, "timestamp": t} for r, t in pairs]
