"""
Storage module for the persisted document.

Provides the key/value backends, document classification and migration,
and the class store.
"""

from zeugnis.storage.file_store import KeyValueStorage, MemoryStorage, FileStorage
from zeugnis.storage.documents import (
    LegacyDocument,
    MultiClassDocument,
    InvalidDocument,
    classify_document,
    detect_format,
    migrate_from_legacy,
    repair_document,
)
from zeugnis.storage.class_store import ClassStore, ImportOutcome, generate_file_name

__all__ = [
    'KeyValueStorage',
    'MemoryStorage',
    'FileStorage',
    'LegacyDocument',
    'MultiClassDocument',
    'InvalidDocument',
    'classify_document',
    'detect_format',
    'migrate_from_legacy',
    'repair_document',
    'ClassStore',
    'ImportOutcome',
    'generate_file_name',
]
