"""
Sanitizer for untrusted rating data.

Import files and the persisted document are both external input. The
functions here turn arbitrary JSON into well-formed model instances or
drop the offending unit (one event, one student). They never raise:
one corrupt record must not stop the rest of a class from loading.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from zeugnis.config.constants import STUDENT_ID_PREFIX, STUDENT_NAME_PLACEHOLDER
from zeugnis.config.logging_config import get_logger
from zeugnis.config.settings import Settings, get_settings
from zeugnis.core.migration import is_bare_rating, is_click_log, migrate_bare_rating, migrate_click_log
from zeugnis.core.models import (
    AssessmentFormat, Category, Competency, Rating, RatingEvent, Student, Subject, generate_id,
)
from zeugnis.core.timestamps import (
    clamp_timestamp, is_integer_value, is_valid_timestamp, now_ms, parse_iso_timestamp,
    parse_leading_int,
)

logger = get_logger(__name__)


# ==================== Validity checks ====================

def is_valid_rating(value: Any) -> bool:
    """Validate a rating value (integer 0-4)."""
    return Rating.is_valid(value)


def is_valid_rating_event(raw: Any) -> bool:
    """Validate a single rating event: rating on the scale, plausible timestamp."""
    if isinstance(raw, RatingEvent):
        return True
    if not isinstance(raw, Mapping):
        return False
    return is_valid_rating(raw.get('rating')) and is_valid_timestamp(raw.get('timestamp'))


# ==================== Rating events ====================

def _coerce_rating(value: Any) -> Optional[Rating]:
    if is_valid_rating(value):
        return Rating(int(value))
    if isinstance(value, str):
        parsed = parse_leading_int(value)
        if parsed is not None and is_valid_rating(parsed):
            return Rating(parsed)
    return None


def _coerce_timestamp(value: Any, settings: Optional[Settings] = None) -> int:
    """Best plausible reading of a timestamp, falling back to now (kept inside the window)."""
    if is_valid_timestamp(value, settings):
        return int(value)
    if isinstance(value, str):
        for candidate in (parse_leading_int(value), parse_iso_timestamp(value)):
            if candidate is not None and is_valid_timestamp(candidate, settings):
                return candidate
    return clamp_timestamp(now_ms(), settings)


def sanitize_rating_event(raw: Any, settings: Optional[Settings] = None) -> Optional[RatingEvent]:
    """
    Repair a single rating event.

    The rating may be an integer or a string starting with one ("3",
    "3.0"); anything else, or a value off the scale, rejects the event.
    The timestamp may be an integer, a numeric string or an ISO-8601
    string; if none of these gives a plausible time the event is kept and
    stamped with "now", moved into the plausible window if necessary.

    Args:
        raw: Event from untrusted JSON
        settings: Settings holding the date window (default: global settings)

    Returns:
        RatingEvent, or None if the rating is unusable
    """
    if isinstance(raw, RatingEvent):
        return raw
    if not isinstance(raw, Mapping):
        return None

    rating = _coerce_rating(raw.get('rating'))
    if rating is None:
        return None

    return RatingEvent.create(rating, _coerce_timestamp(raw.get('timestamp'), settings), settings)


def sanitize_rating_event_list(raw: Any, settings: Optional[Settings] = None) -> List[RatingEvent]:
    """
    Repair a rating history.

    Drops unusable events, keeps the first ``max_events_per_competency``
    survivors and returns them sorted ascending by timestamp.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    limit = (settings or get_settings()).max_events_per_competency
    sanitized: List[RatingEvent] = []
    invalid = 0
    for entry in raw:
        event = sanitize_rating_event(entry, settings)
        if event is None:
            invalid += 1
            continue
        if len(sanitized) >= limit:
            logger.warning(f"Rating history truncated to {limit} entries")
            break
        sanitized.append(event)

    if invalid:
        logger.debug(f"Dropped {invalid} invalid rating entries")

    return sorted(sanitized, key=lambda e: e.timestamp)


# ==================== Students ====================

def _clean_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def sanitize_student(
    raw: Any,
    fallback_index: int = 0,
    issues: Optional[List[str]] = None,
    settings: Optional[Settings] = None
) -> Optional[Student]:
    """
    Repair a student record.

    Missing ids and names are replaced (``student-{ms}-{index}``,
    ``Schüler {index + 1}``). Each assessment entry is repaired on its
    own: event lists are sanitized, v1/v2 values are migrated, anything
    else becomes an empty history. Entries with a blank key are dropped.
    An entry that fails to repair becomes an empty history without
    touching its siblings.

    Args:
        raw: Student from untrusted JSON
        fallback_index: Position of the record, used for fallback id and name
        issues: Optional list collecting human-readable recovery notes
        settings: Settings holding the date window and event cap

    Returns:
        Student, or None only for input that is not an object
    """
    if isinstance(raw, Student):
        return raw
    if not isinstance(raw, Mapping):
        return None

    student_id = _clean_text(raw.get('id'))
    if student_id is None:
        student_id = f"{STUDENT_ID_PREFIX}-{now_ms()}-{fallback_index}"

    name = _clean_text(raw.get('name'))
    if name is None:
        name = f"{STUDENT_NAME_PLACEHOLDER} {fallback_index + 1}"

    assessments = {}
    raw_assessments = raw.get('assessments')
    if isinstance(raw_assessments, Mapping):
        migration_stamp = clamp_timestamp(now_ms(), settings)
        try:
            items = list(raw_assessments.items())
        except Exception as e:
            _record(issues, f"Assessments of student {student_id} could not be read: {e}")
            items = []
        for competency_id, value in items:
            if not isinstance(competency_id, str) or not competency_id.strip():
                continue
            try:
                if isinstance(value, (list, tuple)):
                    history = sanitize_rating_event_list(value, settings)
                elif is_bare_rating(value) or is_integer_value(value):
                    history = migrate_bare_rating(competency_id, value, migration_stamp, settings)
                elif is_click_log(value):
                    history = migrate_click_log(competency_id, value, migration_stamp, settings)
                else:
                    history = []
            except Exception as e:
                _record(issues, f"Assessment {competency_id} of student {student_id} could not be recovered: {e}")
                history = []
            assessments[competency_id] = history

    return Student(id=student_id, name=name, assessments=assessments)


def _record(issues: Optional[List[str]], message: str) -> None:
    logger.warning(message)
    if issues is not None:
        issues.append(message)


def sanitize_students(
    raw: Any,
    issues: Optional[List[str]] = None,
    settings: Optional[Settings] = None
) -> List[Student]:
    """
    Repair a list of students.

    Non-object entries are dropped. Ids repeated within the list are
    replaced with fresh ones, so every student stays addressable.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    students: List[Student] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        student = sanitize_student(entry, index, issues, settings)
        if student is None:
            logger.warning(f"Skipping invalid student record at index {index}")
            if issues is not None:
                issues.append(f"Invalid student record at index {index} skipped")
            continue
        if student.id in seen:
            new_id = generate_id(STUDENT_ID_PREFIX)
            logger.warning(f"Duplicate student id {student.id}, reassigned to {new_id}")
            student = student.model_copy(update={'id': new_id})
        seen.add(student.id)
        students.append(student)

    return students


# ==================== Taxonomy ====================

def _sanitize_competency(raw: Any) -> Optional[Competency]:
    if not isinstance(raw, Mapping):
        return None
    competency_id = _clean_text(raw.get('id'))
    text = raw.get('text')
    if competency_id is None or not isinstance(text, str):
        return None
    return Competency(id=competency_id, text=text)


def _sanitize_category(raw: Any) -> Optional[Category]:
    if not isinstance(raw, Mapping):
        return None
    category_id = _clean_text(raw.get('id'))
    name = raw.get('name')
    if category_id is None or not isinstance(name, str):
        return None
    competencies = raw.get('competencies')
    if not isinstance(competencies, (list, tuple)):
        competencies = []
    return Category(
        id=category_id,
        name=name,
        competencies=[c for c in map(_sanitize_competency, competencies) if c is not None],
    )


def sanitize_subject(raw: Any) -> Optional[Subject]:
    """Repair one subject tree, dropping malformed categories and competencies."""
    if isinstance(raw, Subject):
        return raw
    if not isinstance(raw, Mapping):
        return None
    subject_id = _clean_text(raw.get('id'))
    name = raw.get('name')
    if subject_id is None or not isinstance(name, str):
        return None
    categories = raw.get('categories')
    if not isinstance(categories, (list, tuple)):
        categories = []
    return Subject(
        id=subject_id,
        name=name,
        categories=[c for c in map(_sanitize_category, categories) if c is not None],
    )


def sanitize_subjects(raw: Any, default: Callable[[], List[Subject]]) -> List[Subject]:
    """
    Repair a subject list.

    Args:
        raw: Subject list from untrusted JSON
        default: Factory for the default taxonomy

    Returns:
        The valid subjects; the default taxonomy if ``raw`` is not a list
        or none of its (non-zero) entries is usable
    """
    if not isinstance(raw, (list, tuple)):
        return default()
    subjects = [s for s in map(sanitize_subject, raw) if s is not None]
    if raw and not subjects:
        logger.warning("No usable subject in data, falling back to default subjects")
        return default()
    return subjects


# ==================== Whole assessment maps ====================

@dataclass
class AssessmentValidation:
    """Result of classifying an assessments map."""
    is_valid: bool
    format: AssessmentFormat
    errors: List[str] = field(default_factory=list)


def validate_assessment_data(data: Any) -> AssessmentValidation:
    """
    Classify an assessments map as legacy, modern or invalid.

    legacy: every competency holds a bare rating; modern: every
    competency holds an event list. A map mixing both is invalid rather
    than being read one way or the other. An empty map is valid modern.
    """
    if not isinstance(data, Mapping):
        return AssessmentValidation(False, AssessmentFormat.INVALID, ['Assessment data is not an object'])

    errors: List[str] = []
    if not data:
        return AssessmentValidation(True, AssessmentFormat.MODERN, errors)

    has_legacy = False
    has_modern = False
    for competency_id, value in data.items():
        if not isinstance(competency_id, str) or not competency_id.strip():
            errors.append(f"Invalid competency ID: {competency_id!r}")
            continue

        if isinstance(value, (list, tuple)):
            has_modern = True
            for index, entry in enumerate(value):
                if not is_valid_rating_event(entry):
                    errors.append(f"Invalid rating entry at {competency_id}[{index}]")
        elif is_valid_rating(value):
            has_legacy = True
        else:
            errors.append(f"Invalid assessment value for {competency_id}: {value!r}")

    if has_legacy and has_modern:
        errors.append('Mixed legacy and modern format detected')
        detected = AssessmentFormat.INVALID
    elif has_legacy:
        detected = AssessmentFormat.LEGACY
    elif has_modern:
        detected = AssessmentFormat.MODERN
    else:
        detected = AssessmentFormat.INVALID

    return AssessmentValidation(not errors, detected, errors)
