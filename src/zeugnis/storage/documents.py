"""
Document-level format detection, migration and repair.

Two document shapes exist on disk and in import files:

    multi-class   {version, classes, unassignedStudents, unassignedSubjects,
                   currentClassId, lastModified}
    legacy        {students, subjects}   (before classes existed)

``classify_document`` turns parsed JSON into one of three tagged
variants, so callers handle each shape explicitly. ``repair_document``
and ``migrate_from_legacy`` always return a well-formed
``MultiClassStorage``; they never raise on bad content.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel

from zeugnis.config.constants import CLASS_ID_PREFIX, MAX_CLASS_NAME_LENGTH, STORAGE_VERSION
from zeugnis.config.logging_config import get_logger
from zeugnis.config.settings import Settings
from zeugnis.core.models import ClassData, DataFormat, MultiClassStorage, generate_id
from zeugnis.core.sanitizer import sanitize_students, sanitize_subjects
from zeugnis.core.taxonomy import initial_subjects
from zeugnis.core.timestamps import is_integer_value, now_ms

logger = get_logger(__name__)


# ==================== Classification ====================

@dataclass(frozen=True)
class LegacyDocument:
    """Flat ``{students, subjects}`` document."""
    data: Mapping
    format: ClassVar[DataFormat] = DataFormat.LEGACY


@dataclass(frozen=True)
class MultiClassDocument:
    """Versioned document with classes and the unassigned bucket."""
    data: Mapping
    format: ClassVar[DataFormat] = DataFormat.MULTI_CLASS


@dataclass(frozen=True)
class InvalidDocument:
    """Anything else; ``reason`` says what was missing."""
    reason: str
    format: ClassVar[DataFormat] = DataFormat.INVALID


ClassifiedDocument = LegacyDocument | MultiClassDocument | InvalidDocument


def _as_mapping(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode='json', by_alias=True)
    return data


def classify_document(data: Any) -> ClassifiedDocument:
    """
    Classify parsed JSON (or an export model) by shape.

    multi-class needs a truthy ``version`` and a ``classes`` list; legacy
    needs ``students`` and ``subjects`` lists. The check is structural
    only, contents are repaired later.
    """
    data = _as_mapping(data)
    if not isinstance(data, Mapping):
        return InvalidDocument(f"expected an object, got {type(data).__name__}")

    if data.get('version') and isinstance(data.get('classes'), list):
        return MultiClassDocument(data)

    if isinstance(data.get('students'), list) and isinstance(data.get('subjects'), list):
        return LegacyDocument(data)

    return InvalidDocument("neither a multi-class nor a legacy document")


def detect_format(data: Any) -> DataFormat:
    """Return the ``DataFormat`` of parsed JSON."""
    return classify_document(data).format


# ==================== Migration & repair ====================

def empty_document() -> MultiClassStorage:
    """Fresh document: no classes, unassigned bucket with the default taxonomy."""
    return MultiClassStorage(unassigned_subjects=initial_subjects())


def migrate_from_legacy(
    data: Any,
    issues: Optional[List[str]] = None,
    settings: Optional[Settings] = None
) -> MultiClassStorage:
    """
    Convert a legacy ``{students, subjects}`` document to version 3.0.

    All students land in the unassigned bucket with their assessments
    migrated to event lists. No class is active afterwards.
    """
    data = _as_mapping(data)
    if not isinstance(data, Mapping):
        data = {}

    students = sanitize_students(data.get('students'), issues, settings)
    logger.info(f"Migrating legacy document ({len(students)} students)")
    return MultiClassStorage(
        version=STORAGE_VERSION,
        classes=[],
        unassigned_students=students,
        unassigned_subjects=sanitize_subjects(data.get('subjects'), initial_subjects),
        current_class_id=None,
        last_modified=now_ms(),
    )


def _timestamp_or_now(value: Any) -> int:
    if is_integer_value(value) and value > 0:
        return int(value)
    return now_ms()


def _unique_class_name(name: str, taken_names: set[str]) -> str:
    """Cut a name to the maximum length and suffix " (2)", " (3)"... until it is free."""
    name = name[:MAX_CLASS_NAME_LENGTH].rstrip()
    candidate = name
    counter = 2
    while candidate in taken_names:
        suffix = f" ({counter})"
        candidate = name[:MAX_CLASS_NAME_LENGTH - len(suffix)].rstrip() + suffix
        counter += 1
    return candidate


def _repair_class(
    raw: Any,
    index: int,
    taken_ids: set[str],
    taken_names: set[str],
    issues: Optional[List[str]],
    settings: Optional[Settings] = None
) -> Optional[ClassData]:
    if not isinstance(raw, Mapping):
        logger.warning(f"Skipping invalid class record at index {index}")
        if issues is not None:
            issues.append(f"Invalid class record at index {index} skipped")
        return None

    class_id = raw.get('id')
    if not isinstance(class_id, str) or not class_id.strip() or class_id in taken_ids:
        class_id = generate_id(CLASS_ID_PREFIX)
        logger.warning(f"Class at index {index} has a missing or duplicate id, assigned {class_id}")
    taken_ids.add(class_id)

    name = raw.get('name')
    if not isinstance(name, str) or not name.strip():
        name = f"Klasse {index + 1}"
    name = name.strip()
    unique_name = _unique_class_name(name, taken_names)
    if unique_name != name:
        logger.warning(f"Class at index {index} renamed from {name!r} to {unique_name!r}")
        if issues is not None:
            issues.append(f"Class {name!r} renamed to {unique_name!r}")
    taken_names.add(unique_name)

    return ClassData(
        id=class_id,
        name=unique_name,
        students=sanitize_students(raw.get('students'), issues, settings),
        subjects=sanitize_subjects(raw.get('subjects'), initial_subjects),
        last_modified=_timestamp_or_now(raw.get('lastModified', raw.get('last_modified'))),
    )


def repair_document(
    data: Any,
    issues: Optional[List[str]] = None,
    settings: Optional[Settings] = None
) -> MultiClassStorage:
    """
    Bring a multi-class document into a consistent state.

    - missing or non-list arrays become empty
    - missing subjects fall back to the default taxonomy
    - a ``currentClassId`` that names no class becomes ``None``
    - class names are trimmed, cut to the maximum length and made unique
    - students are sanitized and their assessments migrated

    Args:
        data: Parsed multi-class document
        issues: Optional list collecting human-readable recovery notes
        settings: Settings holding the date window and event cap

    Returns:
        Repaired MultiClassStorage at the current version
    """
    data = _as_mapping(data)
    if not isinstance(data, Mapping):
        data = {}

    raw_classes = data.get('classes')
    if not isinstance(raw_classes, list):
        raw_classes = []

    taken_ids: set[str] = set()
    taken_names: set[str] = set()
    classes = [
        c for c in (
            _repair_class(raw, index, taken_ids, taken_names, issues, settings)
            for index, raw in enumerate(raw_classes)
        ) if c is not None
    ]

    current_class_id = data.get('currentClassId', data.get('current_class_id'))
    if current_class_id is not None and (
        not isinstance(current_class_id, str) or current_class_id not in taken_ids
    ):
        logger.warning(f"Active class {current_class_id!r} does not exist, switching to unassigned")
        if issues is not None:
            issues.append("Active class no longer exists, switched to unassigned students")
        current_class_id = None

    return MultiClassStorage(
        version=STORAGE_VERSION,
        classes=classes,
        unassigned_students=sanitize_students(data.get('unassignedStudents'), issues, settings),
        unassigned_subjects=sanitize_subjects(data.get('unassignedSubjects'), initial_subjects),
        current_class_id=current_class_id,
        last_modified=_timestamp_or_now(data.get('lastModified')),
    )
