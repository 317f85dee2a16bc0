"""
Custom exception hierarchy for the report card assistant.

Provides a consistent error handling approach across all modules.

Validation problems inside batch operations (imports, loading) are
recovered locally and never surface as exceptions; the classes below are
raised only where a single call must fail as a whole.
"""

from typing import Any


class ZeugnisError(Exception):
    """
    Base exception for all report card assistant errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== Validation Errors ====================

class ValidationError(ZeugnisError):
    """
    Error in user-supplied or imported data.

    Raised only by single-value operations (e.g. creating a class);
    batch operations substitute safe defaults instead.
    """
    pass


class ClassValidationError(ValidationError):
    """Raised when a class name fails validation."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {'field': field} if field else None)
        self.field = field


class TimestampValidationError(ValidationError):
    """Raised when a timestamp falls outside the plausible date window."""

    def __init__(self, timestamp: Any):
        super().__init__(f"Invalid timestamp: {timestamp}", {'timestamp': timestamp})
        self.timestamp = timestamp


# ==================== Migration Errors ====================

class DataMigrationError(ZeugnisError):
    """
    Raised when legacy data cannot be read at all.

    The UI shows "data could not be recovered" instead of silently
    discarding the student's history.
    """

    def __init__(self, message: str, original_data: Any = None):
        super().__init__(message)
        self.original_data = original_data


# ==================== Storage Errors ====================

class StorageError(ZeugnisError):
    """
    Base error for storage-related issues.
    """
    pass


class StorageQuotaExceededError(StorageError):
    """Raised by a storage backend when the device quota is exhausted."""
    pass


class StorageFullError(StorageError):
    """
    Raised when the document cannot be persisted because it is too large.

    The message is meant to be shown to the user as-is.
    """

    DEFAULT_MESSAGE = (
        "LocalStorage-Speicher voll. Bitte exportieren Sie Ihre Daten "
        "und löschen Sie alte Klassen."
    )

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.DEFAULT_MESSAGE, details)


class FileAccessError(StorageError):
    """Raised when file access fails."""
    pass


# ==================== Class Store Errors ====================

class ClassStoreError(ZeugnisError):
    """
    Base error for class management issues.
    """
    pass


class ClassNotFoundError(ClassStoreError):
    """Raised when a class id does not name an existing class."""

    def __init__(self, class_id: str):
        super().__init__(f"Class with ID {class_id} not found", {'class_id': class_id})
        self.class_id = class_id


class StudentNotFoundError(ClassStoreError):
    """Raised when a student id is not part of the active scope."""

    def __init__(self, student_id: str):
        super().__init__(f"Student with ID {student_id} not found", {'student_id': student_id})
        self.student_id = student_id


class InvalidImportFormatError(ClassStoreError):
    """Raised when an import file is neither multi-class nor legacy shaped."""

    def __init__(self, message: str = "Ungültiges Dateiformat"):
        super().__init__(message)
