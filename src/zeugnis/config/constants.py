"""
Constants and configuration values for the report card assistant.

Defines storage keys, limits and system-wide defaults.
"""

from datetime import datetime, timezone
from typing import Final

# Storage - keys inside the on-device key/value store
STORAGE_KEY_MULTI_CLASS: Final[str] = "zeugnis-multi-class-state"
STORAGE_KEY_LEGACY: Final[str] = "zeugnis-assistent-state"
STORAGE_VERSION: Final[str] = "3.0"
DATA_DIR: Final[str] = "data"
STORAGE_LOCK_FILE: Final[str] = ".storage.lock"

# Storage limits
MAX_DOCUMENT_BYTES: Final[int] = 5 * 1024 * 1024  # 5MB, typical browser LocalStorage limit

# Rating history
MAX_EVENTS_PER_COMPETENCY: Final[int] = 1000  # Bounds memory on hostile imports
MIN_TIMESTAMP_DATE: Final[datetime] = datetime(2020, 1, 1, tzinfo=timezone.utc)
MAX_TIMESTAMP_DATE: Final[datetime] = datetime(2030, 12, 31, tzinfo=timezone.utc)

# Display thickness thresholds
MEDIUM_THICKNESS_COUNT: Final[int] = 2
THICK_THICKNESS_COUNT: Final[int] = 3

# Classes
MAX_CLASS_NAME_LENGTH: Final[int] = 50
UNASSIGNED: Final[str] = "unassigned"
ALL_CLASSES: Final[str] = "all"
UNASSIGNED_DISPLAY_NAME: Final[str] = "Ohne Klasse"

# Export file naming
EXPORT_FILE_PREFIX: Final[str] = "BewertungSaph"
EXPORT_PREFIX_ALL: Final[str] = "Alle_Klassen"
EXPORT_PREFIX_UNASSIGNED: Final[str] = "Ohne_Klasse"
EXPORT_PREFIX_CLASS_FALLBACK: Final[str] = "Klasse"

# Id prefixes
STUDENT_ID_PREFIX: Final[str] = "student"
CLASS_ID_PREFIX: Final[str] = "class"
COMPETENCY_ID_PREFIX: Final[str] = "comp"

# Placeholder name for students imported without a name ("Schüler 1", ...)
STUDENT_NAME_PLACEHOLDER: Final[str] = "Schüler"
