"""
Legacy assessment format detection and migration.

The assessments map of a student went through three shapes:

    v1  {competency_id: 3}                                  bare rating
    v2  {competency_id: {"3": [ts, ts], "4": [ts]}}         click-log per option
    v3  {competency_id: [{"rating": 3, "timestamp": ts}]}   event list (current)

v1 and v2 are upgraded to v3 on load. One migration pass stamps every
event it has to invent with the same migration timestamp, so all events
of a pass lie within a few milliseconds of each other.

Migration is lossless where the data allows it. A rating that is not on
the scale becomes an empty history, never a guessed rating. Input that
cannot be read at all raises DataMigrationError instead of producing a
partial result.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from zeugnis.config.logging_config import get_logger
from zeugnis.config.settings import Settings
from zeugnis.core.exceptions import DataMigrationError
from zeugnis.core.models import AssessmentFormat, Rating, RatingEvent
from zeugnis.core.timestamps import clamp_timestamp, is_integer_value, is_valid_timestamp, now_ms

logger = get_logger(__name__)


# ==================== Detection ====================

def is_bare_rating(value: Any) -> bool:
    """True for a v1 value: a plain number on the rating scale."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and 0 <= value <= 4
    )


def _rating_key(key: Any) -> Optional[Rating]:
    if isinstance(key, str):
        key = key.strip()
        if not key.isdigit():
            return None
        key = int(key)
    if Rating.is_valid(key):
        return Rating(int(key))
    return None


def is_click_log(value: Any) -> bool:
    """True for a v2 value: a mapping of rating keys to timestamp lists."""
    if not isinstance(value, Mapping):
        return False
    return all(
        _rating_key(key) is not None and isinstance(stamps, (list, tuple))
        for key, stamps in value.items()
    )


def is_legacy_format(assessments: Any) -> bool:
    """
    Check whether an assessments map still holds v1 bare ratings.

    Args:
        assessments: Assessments map of one student

    Returns:
        True iff at least one value is a bare numeric rating
    """
    if not isinstance(assessments, Mapping):
        return False
    try:
        return any(is_bare_rating(value) for value in assessments.values())
    except Exception as e:
        logger.warning(f"Error checking legacy format: {e}")
        return False


def is_click_log_format(assessments: Any) -> bool:
    """True iff at least one value of the map is a v2 click-log."""
    if not isinstance(assessments, Mapping):
        return False
    try:
        return any(is_click_log(value) for value in assessments.values())
    except Exception as e:
        logger.warning(f"Error checking click-log format: {e}")
        return False


def detect_assessment_format(assessments: Any) -> AssessmentFormat:
    """
    Classify an assessments map by the oldest shape it contains.

    Maps that need no migration are reported as MODERN, even when some
    entries are garbage; the sanitizer deals with those.
    """
    if not isinstance(assessments, Mapping):
        return AssessmentFormat.INVALID
    if is_legacy_format(assessments):
        return AssessmentFormat.LEGACY
    if is_click_log_format(assessments):
        return AssessmentFormat.CLICK_LOG
    return AssessmentFormat.MODERN


# ==================== Single values ====================

def migrate_bare_rating(
    competency_id: str,
    rating: Any,
    timestamp: int,
    settings: Optional[Settings] = None
) -> List[RatingEvent]:
    """Convert one v1 value. Ratings off the scale give an empty history."""
    if Rating.is_valid(rating):
        return [RatingEvent.create(Rating(int(rating)), timestamp, settings)]
    logger.warning(f"Invalid rating value during migration for {competency_id}: {rating!r}")
    return []


def migrate_click_log(
    competency_id: str,
    log: Mapping,
    timestamp: int,
    settings: Optional[Settings] = None
) -> List[RatingEvent]:
    """
    Convert one v2 value into an event list sorted by timestamp.

    Every click is kept. Clicks whose stored time is implausible get the
    migration timestamp, so the per-option counts survive.
    """
    events: List[RatingEvent] = []
    for key, stamps in log.items():
        rating = _rating_key(key)
        if rating is None or not isinstance(stamps, (list, tuple)):
            logger.warning(f"Dropping unreadable click-log entry for {competency_id}: {key!r}")
            continue
        for stamp in stamps:
            when = int(stamp) if is_valid_timestamp(stamp, settings) else timestamp
            events.append(RatingEvent.create(rating, when, settings))
    events.sort(key=lambda e: e.timestamp)
    return events


# ==================== Whole maps ====================

def _is_blank_key(key: Any) -> bool:
    return not isinstance(key, str) or not key.strip()


def _migration_stamp(timestamp: Optional[int], settings: Optional[Settings]) -> int:
    """The shared stamp of one pass: now by default, always inside the plausible window."""
    return clamp_timestamp(now_ms() if timestamp is None else timestamp, settings)


def _items(data: Any, what: str) -> list:
    """Materialize the items of a map, turning any failure into DataMigrationError."""
    if not isinstance(data, Mapping):
        raise DataMigrationError(
            f"Migration failed: {what} is not a mapping ({type(data).__name__})",
            original_data=data,
        )
    try:
        return list(data.items())
    except Exception as e:
        logger.error(f"Error during {what} migration: {e}")
        raise DataMigrationError(f"Migration failed: {e}", original_data=data) from e


def migrate_legacy_assessments(
    legacy: Any,
    timestamp: Optional[int] = None,
    settings: Optional[Settings] = None
) -> Dict[str, List[RatingEvent]]:
    """
    Upgrade a v1 assessments map to event lists.

    Args:
        legacy: {competency_id: rating}
        timestamp: Migration timestamp shared by all events (defaults to now)
        settings: Settings holding the date window (default: global settings)

    Returns:
        {competency_id: [RatingEvent]}; blank keys are skipped, ratings off
        the scale migrate to an empty list

    Raises:
        DataMigrationError: If the input cannot be iterated
    """
    stamp = _migration_stamp(timestamp, settings)
    modern: Dict[str, List[RatingEvent]] = {}

    for competency_id, rating in _items(legacy, "legacy assessment"):
        if _is_blank_key(competency_id):
            logger.warning(f"Skipping invalid competency ID during migration: {competency_id!r}")
            continue
        modern[competency_id] = migrate_bare_rating(competency_id, rating, stamp, settings)

    return modern


def migrate_click_log_assessments(
    logs: Any,
    timestamp: Optional[int] = None,
    settings: Optional[Settings] = None
) -> Dict[str, List[RatingEvent]]:
    """
    Upgrade a v2 assessments map to event lists.

    Raises:
        DataMigrationError: If the input cannot be iterated
    """
    stamp = _migration_stamp(timestamp, settings)
    modern: Dict[str, List[RatingEvent]] = {}

    for competency_id, log in _items(logs, "click-log assessment"):
        if _is_blank_key(competency_id):
            logger.warning(f"Skipping invalid competency ID during migration: {competency_id!r}")
            continue
        if isinstance(log, Mapping) and is_click_log(log):
            modern[competency_id] = migrate_click_log(competency_id, log, stamp, settings)
        else:
            logger.warning(f"Invalid click-log during migration for {competency_id}")
            modern[competency_id] = []

    return modern


def migrate_assessments(
    assessments: Any,
    timestamp: Optional[int] = None,
    settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """
    Upgrade every old-shaped value of a map, whatever mix of shapes it holds.

    v1 and v2 values are converted with one shared migration timestamp.
    Lists are passed through untouched for the sanitizer to check; any
    other value becomes an empty history.

    Raises:
        DataMigrationError: If the input cannot be iterated
    """
    stamp = _migration_stamp(timestamp, settings)
    result: Dict[str, Any] = {}
    migrated = 0

    for competency_id, value in _items(assessments, "assessment"):
        if _is_blank_key(competency_id):
            logger.warning(f"Skipping invalid competency ID during migration: {competency_id!r}")
            continue
        if isinstance(value, (list, tuple)):
            result[competency_id] = list(value)
        elif is_bare_rating(value) or is_integer_value(value):
            result[competency_id] = migrate_bare_rating(competency_id, value, stamp, settings)
            migrated += 1
        elif is_click_log(value):
            result[competency_id] = migrate_click_log(competency_id, value, stamp, settings)
            migrated += 1
        else:
            logger.warning(f"Invalid assessment value for {competency_id}, starting empty history")
            result[competency_id] = []

    if migrated:
        logger.debug(f"Migrated {migrated} legacy assessment values")
    return result
