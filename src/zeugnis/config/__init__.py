"""
Configuration module for the report card assistant.

Provides settings, constants, and logging configuration.
"""

from zeugnis.config.settings import get_settings, reload_settings, Settings
from zeugnis.config.logging_config import (
    setup_structured_logging,
    setup_logging_from_settings,
    get_logger,
)
from zeugnis.config.constants import (
    # Storage
    STORAGE_KEY_MULTI_CLASS,
    STORAGE_KEY_LEGACY,
    STORAGE_VERSION,
    DATA_DIR,
    MAX_DOCUMENT_BYTES,
    # Rating history
    MAX_EVENTS_PER_COMPETENCY,
    MIN_TIMESTAMP_DATE,
    MAX_TIMESTAMP_DATE,
    # Classes
    MAX_CLASS_NAME_LENGTH,
    UNASSIGNED,
    ALL_CLASSES,
)

__all__ = [
    # Settings
    'get_settings',
    'reload_settings',
    'Settings',
    # Logging
    'setup_structured_logging',
    'setup_logging_from_settings',
    'get_logger',
    # Constants
    'STORAGE_KEY_MULTI_CLASS',
    'STORAGE_KEY_LEGACY',
    'STORAGE_VERSION',
    'DATA_DIR',
    'MAX_DOCUMENT_BYTES',
    'MAX_EVENTS_PER_COMPETENCY',
    'MIN_TIMESTAMP_DATE',
    'MAX_TIMESTAMP_DATE',
    'MAX_CLASS_NAME_LENGTH',
    'UNASSIGNED',
    'ALL_CLASSES',
]
