"""
Key/value storage backends - the on-device persistence layer.

The class store persists one JSON document under a fixed key, the way a
browser app uses LocalStorage. Two backends implement the same small
interface:

    MemoryStorage   dict-backed, for tests and embedding
    FileStorage     one file per key under a data directory

Architecture (FileStorage):
    data/
    ├── zeugnis-multi-class-state.json   # Current document (v3.0)
    ├── zeugnis-assistent-state.json     # Legacy document, read once for migration
    └── .storage.lock                    # Lock file, reused across writes

Both backends can enforce a quota in bytes. Exceeding it raises
StorageQuotaExceededError, the equivalent of the browser's
QuotaExceededError. There is no change notification between processes:
the last writer wins.
"""

import errno
import fcntl
import os
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from zeugnis.config.constants import DATA_DIR, STORAGE_LOCK_FILE
from zeugnis.config.logging_config import get_logger
from zeugnis.core.exceptions import FileAccessError, StorageQuotaExceededError

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9._-]+$')


class KeyValueStorage(Protocol):
    """Minimal LocalStorage-like interface."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def _size(value: str) -> int:
    return len(value.encode('utf-8'))


class MemoryStorage:
    """
    In-memory key/value storage.

    Args:
        quota_bytes: Optional total size limit over all keys
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            others = sum(_size(v) for k, v in self._items.items() if k != key)
            if others + _size(value) > self.quota_bytes:
                raise StorageQuotaExceededError(
                    "Storage quota exceeded",
                    {"key": key, "quota_bytes": self.quota_bytes},
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage:
    """
    File-backed key/value storage.

    Each key is stored as ``{base_dir}/{key}.json``. Writes go to a
    temporary file that replaces the target atomically, under an
    exclusive lock on a dedicated lock file.

    Args:
        base_dir: Data directory (default: ``data``)
        quota_bytes: Optional total size limit over all stored keys
    """

    def __init__(self, base_dir: str | Path | None = None, quota_bytes: Optional[int] = None):
        self.base_dir = Path(base_dir or DATA_DIR)
        self.quota_bytes = quota_bytes

    # ==================== PATHS ====================

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise FileAccessError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def _used_bytes(self, exclude: Path) -> int:
        if not self.base_dir.exists():
            return 0
        return sum(
            p.stat().st_size for p in self.base_dir.glob("*.json")
            if p != exclude
        )

    # ==================== ACCESS ====================

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.base_dir.mkdir(parents=True, exist_ok=True)

        lock_path = self.base_dir / STORAGE_LOCK_FILE
        lock_fd = None
        try:
            lock_fd = os.open(str(lock_path), os.O_CREAT | os.O_WRONLY, 0o644)
            try:
                # Acquire exclusive lock (blocks until available)
                fcntl.flock(lock_fd, fcntl.LOCK_EX)

                if self.quota_bytes is not None:
                    if self._used_bytes(exclude=path) + _size(value) > self.quota_bytes:
                        raise StorageQuotaExceededError(
                            "Storage quota exceeded",
                            {"key": key, "quota_bytes": self.quota_bytes},
                        )

                # Write to temp, then rename
                temp_file = path.with_suffix('.tmp')
                try:
                    with open(temp_file, 'w', encoding='utf-8') as f:
                        f.write(value)
                        f.flush()
                        os.fsync(f.fileno())
                    temp_file.replace(path)  # Atomic on POSIX
                except OSError as e:
                    temp_file.unlink(missing_ok=True)
                    if e.errno in (errno.ENOSPC, errno.EDQUOT):
                        raise StorageQuotaExceededError(f"No space left for {key}: {e}") from e
                    raise FileAccessError(f"Failed to write {path}: {e}") from e
            finally:
                fcntl.flock(lock_fd, fcntl.LOCK_UN)
        finally:
            if lock_fd is not None:
                os.close(lock_fd)

        logger.debug(f"Stored {key} ({_size(value)} bytes)")

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise FileAccessError(f"Failed to remove {path}: {e}") from e
