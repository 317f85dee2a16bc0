"""
Tests for the consensus engine.
"""

import pytest

from zeugnis.core.consensus import (
    add_rating_event, count_by_rating, display_state, events_for_rating,
    most_frequent_rating, remove_rating_event, report_rating
)
from zeugnis.core.exceptions import TimestampValidationError, ValidationError
from zeugnis.core.models import Rating, RatingEvent, Student, Thickness
from conftest import T0, events


def test_count_by_rating():
    history = events((3, T0), (3, T0 + 1), (4, T0 + 2))

    assert count_by_rating(history, 3) == 2
    assert count_by_rating(history, 4) == 1
    assert count_by_rating(history, 0) == 0


def test_count_skips_invalid_entries():
    """Invalid events are ignored, not counted."""
    history = [
        {"rating": 3, "timestamp": T0},
        {"rating": 7, "timestamp": T0},
        {"rating": 3, "timestamp": "yesterday"},
        {"rating": 3, "timestamp": -1},
        None,
        "3",
    ]

    assert count_by_rating(history, 3) == 1


@pytest.mark.parametrize("history", [None, [], "abc", {"rating": 3}, 42])
def test_count_non_list_history(history):
    assert count_by_rating(history, 3) == 0


def test_count_invalid_target():
    assert count_by_rating(events((3, T0)), 9) == 0


def test_most_frequent_rating():
    history = events((4, T0), (3, T0 + 1), (3, T0 + 2))

    assert most_frequent_rating(history) is Rating.PROFICIENT


def test_most_frequent_tie_goes_to_latest():
    """On equal counts the rating clicked most recently wins."""
    history = events((3, 1000), (4, 2000), (3, 3000), (4, 4000))

    assert most_frequent_rating(history) is Rating.EXCELLENT


def test_most_frequent_tie_order_independent():
    history = events((4, 4000), (3, 3000), (4, 2000), (3, 1000))

    assert most_frequent_rating(history) is Rating.EXCELLENT


def test_most_frequent_equal_latest_keeps_first_seen():
    history = events((2, T0), (1, T0))

    assert most_frequent_rating(history) is Rating.PARTIAL


def test_most_frequent_empty():
    assert most_frequent_rating([]) is None
    assert most_frequent_rating(None) is None


def test_most_frequent_accepts_models():
    history = [RatingEvent(rating=1, timestamp=T0), RatingEvent(rating=1, timestamp=T0 + 5)]

    assert most_frequent_rating(history) is Rating.LOW


def test_report_rating_defaults_to_not_taught():
    assert report_rating([]) is Rating.NOT_TAUGHT
    assert report_rating(events((2, T0))) is Rating.PARTIAL


@pytest.mark.parametrize("clicks,thickness,badge", [
    (0, Thickness.THIN, False),
    (1, Thickness.THIN, True),
    (2, Thickness.MEDIUM, True),
    (3, Thickness.THICK, True),
    (7, Thickness.THICK, True),
])
def test_display_state(clicks, thickness, badge):
    history = events(*[(2, T0 + i) for i in range(clicks)])

    state = display_state(history, 2)

    assert state.count == clicks
    assert state.thickness is thickness
    assert state.show_badge is badge


def test_events_for_rating():
    history = events((3, T0), (4, T0 + 1), (3, T0 + 2))

    selected = events_for_rating(history, 3)
    newest = events_for_rating(history, 3, newest_first=True)

    assert [e.timestamp for e in selected] == [T0, T0 + 2]
    assert [e.timestamp for e in newest] == [T0 + 2, T0]


def test_events_for_rating_agrees_with_count():
    """Events outside the date window are listed as long as they are counted."""
    history = events((3, 1000), (3, 2000), (2, T0))

    selected = events_for_rating(history, 3)

    assert [e.timestamp for e in selected] == [1000, 2000]
    assert len(selected) == count_by_rating(history, 3)


def test_add_rating_event_appends():
    student = Student(id="s1", name="Anna")

    first = add_rating_event(student, "comp-1", 3, T0)
    second = add_rating_event(first, "comp-1", 4, T0 + 1)

    assert student.assessments == {}
    assert first.events_for("comp-1") == [RatingEvent(rating=3, timestamp=T0)]
    assert second.events_for("comp-1") == [
        RatingEvent(rating=3, timestamp=T0),
        RatingEvent(rating=4, timestamp=T0 + 1),
    ]


def test_add_rating_event_defaults_to_now():
    student = add_rating_event(Student(id="s1", name="Anna"), "comp-1", 0)

    assert student.events_for("comp-1")[0].timestamp > T0


def test_add_rating_event_rejects_bad_input():
    student = Student(id="s1", name="Anna")

    with pytest.raises(ValidationError):
        add_rating_event(student, "comp-1", 5, T0)
    with pytest.raises(ValidationError):
        add_rating_event(student, "  ", 3, T0)
    with pytest.raises(TimestampValidationError):
        add_rating_event(student, "comp-1", 3, 1000)


def test_remove_rating_event_removes_one_match():
    student = Student(id="s1", name="Anna", assessments={
        "comp-1": [
            RatingEvent(rating=3, timestamp=T0),
            RatingEvent(rating=3, timestamp=T0),
            RatingEvent(rating=4, timestamp=T0 + 1),
        ]
    })

    updated = remove_rating_event(student, "comp-1", 3, T0)

    assert updated.events_for("comp-1") == [
        RatingEvent(rating=3, timestamp=T0),
        RatingEvent(rating=4, timestamp=T0 + 1),
    ]


def test_remove_rating_event_no_match():
    student = Student(id="s1", name="Anna", assessments={
        "comp-1": [RatingEvent(rating=3, timestamp=T0)]
    })

    assert remove_rating_event(student, "comp-1", 4, T0) == student
    assert remove_rating_event(student, "comp-2", 3, T0) == student
