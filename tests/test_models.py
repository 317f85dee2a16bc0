"""
Tests for core models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from zeugnis.core.models import (
    ClassData, MultiClassStorage, Rating, RatingEvent, Student, generate_id
)
from conftest import T0


def test_generate_id():
    """Test ID generation."""
    id1 = generate_id("student")
    id2 = generate_id("student")

    assert id1 != id2
    assert id1.startswith("student-")


def test_rating_scale():
    """Test the five-point scale and its labels."""
    assert [r.value for r in Rating] == [0, 1, 2, 3, 4]
    assert Rating.NOT_TAUGHT.label == "nicht vermittelt"
    assert Rating.EXCELLENT.label == "sehr ausgeprägt"


@pytest.mark.parametrize("value,expected", [
    (0, True), (4, True), (4.0, True), (5, False), (-1, False),
    (2.5, False), (True, False), ("3", False), (None, False),
])
def test_rating_is_valid(value, expected):
    assert Rating.is_valid(value) is expected


def test_rating_event():
    """Test RatingEvent model."""
    event = RatingEvent(rating=3, timestamp=T0)

    assert event.rating is Rating.PROFICIENT
    assert event.timestamp == T0


@pytest.mark.parametrize("timestamp", [0, -5, 1000, 4_102_444_800_000])
def test_rating_event_rejects_implausible_timestamp(timestamp):
    with pytest.raises(PydanticValidationError):
        RatingEvent(rating=3, timestamp=timestamp)


def test_models_are_frozen():
    student = Student(id="s1", name="Anna")

    with pytest.raises(PydanticValidationError):
        student.name = "Berta"


def test_student_events_for():
    student = Student(
        id="s1",
        name="Anna",
        assessments={"comp-1": [RatingEvent(rating=2, timestamp=T0)]}
    )

    assert student.events_for("comp-1") == [RatingEvent(rating=2, timestamp=T0)]
    assert student.events_for("missing") == []


def test_document_serializes_with_camel_case():
    """Test the on-disk field names."""
    document = MultiClassStorage(
        classes=[ClassData(id="class-1", name="3a", last_modified=T0)],
        current_class_id="class-1",
        last_modified=T0,
    )

    dumped = document.model_dump(mode='json', by_alias=True)

    assert dumped["version"] == "3.0"
    assert dumped["currentClassId"] == "class-1"
    assert dumped["unassignedStudents"] == []
    assert dumped["classes"][0]["lastModified"] == T0


def test_document_parses_camel_case():
    document = MultiClassStorage.model_validate({
        "version": "3.0",
        "classes": [],
        "unassignedStudents": [{"id": "s1", "name": "Anna", "assessments": {}}],
        "unassignedSubjects": [],
        "currentClassId": None,
        "lastModified": T0,
    })

    assert document.unassigned_students[0].name == "Anna"
    assert document.current_class_id is None
