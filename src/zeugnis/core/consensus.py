"""
Consensus engine: reduces a competency's rating history to one value.

Every click on a rating option is kept as a RatingEvent. The functions
here derive what the UI and the report need from that history:

- count_by_rating / display_state: per-option click counts and the
  matching border thickness
- most_frequent_rating: the "majority rating" printed on the report
- add_rating_event / remove_rating_event: append-only history edits

Histories may come straight from untrusted JSON, so every function
accepts RatingEvent instances or plain mappings and silently skips
entries that are not valid events. Nothing in this module raises for bad
history data.
"""

from collections.abc import Iterable, Mapping
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from zeugnis.config.constants import MEDIUM_THICKNESS_COUNT, THICK_THICKNESS_COUNT
from zeugnis.config.settings import Settings
from zeugnis.core.exceptions import TimestampValidationError, ValidationError
from zeugnis.core.models import (
    Rating, RatingDisplayState, RatingEvent, Student, Thickness,
)
from zeugnis.core.timestamps import is_integer_value, now_ms


def _as_rating(value: Any) -> Optional[Rating]:
    if Rating.is_valid(value):
        return Rating(int(value))
    return None


def _event_fields(event: Any) -> Optional[tuple[Rating, int]]:
    """
    Extract (rating, timestamp) from an event, or None if it is not valid.

    Valid means an integer rating on the scale and a positive integer
    timestamp. The plausible date window is enforced by the sanitizer,
    not here.
    """
    if isinstance(event, RatingEvent):
        return event.rating, event.timestamp
    if not isinstance(event, Mapping):
        return None

    rating = _as_rating(event.get('rating'))
    timestamp = event.get('timestamp')
    if rating is None or not is_integer_value(timestamp) or timestamp <= 0:
        return None
    return rating, int(timestamp)


def _valid_events(events: Any) -> List[tuple[Rating, int]]:
    if not events or isinstance(events, (str, bytes, Mapping)) or not isinstance(events, Iterable):
        return []
    valid = []
    for event in events:
        fields = _event_fields(event)
        if fields is not None:
            valid.append(fields)
    return valid


def count_by_rating(events: Any, target: Any) -> int:
    """
    Count valid events equal to a rating.

    Args:
        events: Rating history (RatingEvents or raw mappings)
        target: Rating to count

    Returns:
        Number of valid events with that rating, 0 for an invalid target
    """
    rating = _as_rating(target)
    if rating is None:
        return 0
    return sum(1 for r, _ in _valid_events(events) if r == rating)


def most_frequent_rating(events: Any) -> Optional[Rating]:
    """
    Return the rating with the highest count among valid events.

    Ties go to the rating whose most recent event has the larger
    timestamp. When the latest timestamps are equal as well, the rating
    seen first in the history keeps the lead.

    Args:
        events: Rating history (RatingEvents or raw mappings)

    Returns:
        The majority Rating, or None if there are no valid events
    """
    valid = _valid_events(events)
    if not valid:
        return None

    # dicts keep first-seen order, which decides equal-timestamp ties
    counts: dict[Rating, int] = {}
    latest: dict[Rating, int] = {}
    for rating, timestamp in valid:
        counts[rating] = counts.get(rating, 0) + 1
        latest[rating] = max(latest.get(rating, timestamp), timestamp)

    winner: Optional[Rating] = None
    max_count = 0
    winner_latest = 0
    for rating, count in counts.items():
        if count > max_count or (count == max_count and latest[rating] > winner_latest):
            winner = rating
            max_count = count
            winner_latest = latest[rating]

    return winner


def report_rating(events: Any) -> Rating:
    """Rating printed on the report card: majority rating, NOT_TAUGHT if none."""
    rating = most_frequent_rating(events)
    return rating if rating is not None else Rating.NOT_TAUGHT


def thickness_for_count(count: int) -> Thickness:
    if count >= THICK_THICKNESS_COUNT:
        return Thickness.THICK
    if count == MEDIUM_THICKNESS_COUNT:
        return Thickness.MEDIUM
    return Thickness.THIN


def display_state(events: Any, target: Any) -> RatingDisplayState:
    """
    Derive the visual state of one rating option.

    thin for count <= 1, medium for 2, thick for 3+; the badge shows as
    soon as the option has been clicked once.
    """
    count = count_by_rating(events, target)
    return RatingDisplayState(
        count=count,
        thickness=thickness_for_count(count),
        show_badge=count > 0,
    )


def events_for_rating(events: Any, target: Any, newest_first: bool = False) -> List[RatingEvent]:
    """
    Return the valid events of one rating, for the history view.

    Args:
        events: Rating history
        target: Rating to select
        newest_first: Sort descending by timestamp instead of keeping insertion order
    """
    rating = _as_rating(target)
    if rating is None:
        return []

    selected = []
    for r, timestamp in _valid_events(events):
        if r != rating:
            continue
        # same validity rule as count_by_rating, no date window
        selected.append(RatingEvent.model_construct(rating=r, timestamp=timestamp))
    if newest_first:
        selected.sort(key=lambda e: e.timestamp, reverse=True)
    return selected


# ==================== History edits ====================

def add_rating_event(
    student: Student,
    competency_id: str,
    rating: Any,
    timestamp: Optional[int] = None,
    settings: Optional[Settings] = None
) -> Student:
    """
    Append a rating event to a student's history.

    Prior events are never modified or removed.

    Args:
        student: Student to update
        competency_id: Competency that was rated
        rating: Rating value (0-4)
        timestamp: Event time in ms, defaults to now
        settings: Settings holding the date window (default: global settings)

    Returns:
        New Student instance

    Raises:
        ValidationError: If the competency id is blank or the rating is not on the scale
        TimestampValidationError: If the timestamp is outside the plausible window
    """
    if not isinstance(competency_id, str) or not competency_id.strip():
        raise ValidationError("Competency id must not be empty", {'competency_id': competency_id})

    value = _as_rating(rating)
    if value is None:
        raise ValidationError(f"Invalid rating: {rating}", {'rating': rating})

    when = now_ms() if timestamp is None else timestamp
    try:
        event = RatingEvent.create(value, when, settings)
    except PydanticValidationError as e:
        raise TimestampValidationError(when) from e

    assessments = dict(student.assessments)
    assessments[competency_id] = [*assessments.get(competency_id, []), event]
    return student.model_copy(update={'assessments': assessments})


def remove_rating_event(
    student: Student,
    competency_id: str,
    rating: Any,
    timestamp: int
) -> Student:
    """
    Remove one event identified by the exact (rating, timestamp) pair.

    Other events of the competency are kept in their order. If no event
    matches, an equal student is returned.
    """
    history = student.assessments.get(competency_id)
    value = _as_rating(rating)
    if not history or value is None:
        return student

    remaining = list(history)
    for index, event in enumerate(remaining):
        if event.rating == value and event.timestamp == timestamp:
            del remaining[index]
            break
    else:
        return student

    assessments = dict(student.assessments)
    assessments[competency_id] = remaining
    return student.model_copy(update={'assessments': assessments})
