"""
Core module for the report card assistant.

Exports models, the consensus engine, sanitizer, migration helpers and
exceptions for easy access.
"""

from zeugnis.core.models import (
    Rating,
    RatingEvent,
    RatingDisplayState,
    Thickness,
    DataFormat,
    AssessmentFormat,
    Competency,
    Category,
    Subject,
    Student,
    ClassData,
    MultiClassStorage,
    LegacyAppState,
    ClassExport,
    AllClassesExport,
    generate_id,
)

from zeugnis.core.consensus import (
    count_by_rating,
    most_frequent_rating,
    report_rating,
    display_state,
    events_for_rating,
    add_rating_event,
    remove_rating_event,
)

from zeugnis.core.sanitizer import (
    is_valid_rating,
    is_valid_rating_event,
    sanitize_rating_event,
    sanitize_rating_event_list,
    sanitize_student,
    sanitize_students,
    sanitize_subjects,
    validate_assessment_data,
    AssessmentValidation,
)

from zeugnis.core.migration import (
    is_legacy_format,
    is_click_log_format,
    detect_assessment_format,
    migrate_legacy_assessments,
    migrate_click_log_assessments,
    migrate_assessments,
)

from zeugnis.core.class_validation import (
    ClassNameValidation,
    validate_class_name,
    format_mismatch_warning,
)

from zeugnis.core.exceptions import (
    ZeugnisError,
    ValidationError,
    ClassValidationError,
    TimestampValidationError,
    DataMigrationError,
    StorageError,
    StorageQuotaExceededError,
    StorageFullError,
    FileAccessError,
    ClassStoreError,
    ClassNotFoundError,
    StudentNotFoundError,
    InvalidImportFormatError,
)

__all__ = [
    # Models
    'Rating',
    'RatingEvent',
    'RatingDisplayState',
    'Thickness',
    'DataFormat',
    'AssessmentFormat',
    'Competency',
    'Category',
    'Subject',
    'Student',
    'ClassData',
    'MultiClassStorage',
    'LegacyAppState',
    'ClassExport',
    'AllClassesExport',
    'generate_id',
    # Consensus
    'count_by_rating',
    'most_frequent_rating',
    'report_rating',
    'display_state',
    'events_for_rating',
    'add_rating_event',
    'remove_rating_event',
    # Sanitizer
    'is_valid_rating',
    'is_valid_rating_event',
    'sanitize_rating_event',
    'sanitize_rating_event_list',
    'sanitize_student',
    'sanitize_students',
    'sanitize_subjects',
    'validate_assessment_data',
    'AssessmentValidation',
    # Migration
    'is_legacy_format',
    'is_click_log_format',
    'detect_assessment_format',
    'migrate_legacy_assessments',
    'migrate_click_log_assessments',
    'migrate_assessments',
    # Class validation
    'ClassNameValidation',
    'validate_class_name',
    'format_mismatch_warning',
    # Exceptions
    'ZeugnisError',
    'ValidationError',
    'ClassValidationError',
    'TimestampValidationError',
    'DataMigrationError',
    'StorageError',
    'StorageQuotaExceededError',
    'StorageFullError',
    'FileAccessError',
    'ClassStoreError',
    'ClassNotFoundError',
    'StudentNotFoundError',
    'InvalidImportFormatError',
]
