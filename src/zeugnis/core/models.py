"""
Core data models for the report card assistant.

This module defines all Pydantic models used throughout the system.
They mirror the persisted JSON document: field names are snake_case in
Python and camelCase on disk (use ``model_dump(mode='json', by_alias=True)``).

All models are frozen. Operations that "change" a student or a class
return a new instance built with ``model_copy(update=...)``.
"""

from __future__ import annotations

import uuid
from enum import Enum, IntEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from zeugnis.config.constants import STORAGE_VERSION
from zeugnis.config.settings import Settings
from zeugnis.core.timestamps import is_integer_value, is_valid_timestamp, now_ms


class Rating(IntEnum):
    """Five-point ordinal competency scale."""
    NOT_TAUGHT = 0  # n.v. (nicht vermittelt)
    LOW = 1
    PARTIAL = 2
    PROFICIENT = 3
    EXCELLENT = 4

    @classmethod
    def is_valid(cls, value) -> bool:
        """True for integer values on the scale (bools excluded)."""
        return is_integer_value(value) and 0 <= value <= 4

    @property
    def label(self) -> str:
        """German wording used on the report card."""
        return _RATING_LABELS[self]


_RATING_LABELS = {
    Rating.NOT_TAUGHT: "nicht vermittelt",
    Rating.LOW: "gering ausgeprägt",
    Rating.PARTIAL: "teilweise ausgeprägt",
    Rating.PROFICIENT: "ausgeprägt",
    Rating.EXCELLENT: "sehr ausgeprägt",
}


class Thickness(str, Enum):
    """Border thickness of a rating option, grows with its click count."""
    THIN = "thin"
    MEDIUM = "medium"
    THICK = "thick"


class DataFormat(str, Enum):
    """Shape of an import file or persisted document."""
    MULTI_CLASS = "multi-class"
    LEGACY = "legacy"
    INVALID = "invalid"


class AssessmentFormat(str, Enum):
    """Shape of a student's assessments map."""
    LEGACY = "legacy"         # {competency_id: rating}
    CLICK_LOG = "click-log"   # {competency_id: {rating: [timestamps]}}
    MODERN = "modern"         # {competency_id: [{rating, timestamp}]}
    INVALID = "invalid"


def generate_id(prefix: str) -> str:
    """
    Generate a unique, never reused id.

    Combines the creation time with a random suffix, e.g.
    ``student-1718000000000-3f9a1c2b``.
    """
    return f"{prefix}-{now_ms()}-{uuid.uuid4().hex[:8]}"


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ==================== Rating history ====================

class RatingEvent(_Model):
    """
    One rating click at one point in time.

    A competency's history is the list of its events in insertion order;
    chronological order is always re-derived from ``timestamp``.

    The window comes from ``settings`` in the validation context, or from
    the global settings; use ``RatingEvent.create`` to pass them.
    """
    rating: Rating
    timestamp: int  # Unix milliseconds

    @classmethod
    def create(cls, rating, timestamp: int, settings: Optional[Settings] = None) -> RatingEvent:
        return cls.model_validate(
            {'rating': rating, 'timestamp': timestamp},
            context={'settings': settings},
        )

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: int, info: ValidationInfo) -> int:
        settings = (info.context or {}).get('settings')
        if not is_valid_timestamp(v, settings):
            raise ValueError(f"timestamp {v} is outside the plausible date window")
        return v


class RatingDisplayState(_Model):
    """Visual affordance for one rating option of one competency."""
    count: int
    thickness: Thickness
    show_badge: bool = Field(alias="showBadge")


# ==================== Taxonomy ====================

class Competency(_Model):
    id: str
    text: str


class Category(_Model):
    id: str
    name: str
    competencies: List[Competency] = Field(default_factory=list)


class Subject(_Model):
    id: str
    name: str
    categories: List[Category] = Field(default_factory=list)


# ==================== Students and classes ====================

class Student(_Model):
    """
    A student and the full rating history per competency.

    A competency missing from ``assessments`` has no events.
    """
    id: str
    name: str
    assessments: Dict[str, List[RatingEvent]] = Field(default_factory=dict)

    def events_for(self, competency_id: str) -> List[RatingEvent]:
        return list(self.assessments.get(competency_id, []))


class ClassData(_Model):
    """A named class owning its students and its own copy of the taxonomy."""
    id: str
    name: str
    students: List[Student] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list)
    last_modified: int = Field(default_factory=now_ms, alias="lastModified")


class MultiClassStorage(_Model):
    """
    The persisted document (version 3.0).

    ``current_class_id`` selects the active scope; ``None`` means the
    unassigned bucket is active.
    """
    version: str = STORAGE_VERSION
    classes: List[ClassData] = Field(default_factory=list)
    unassigned_students: List[Student] = Field(default_factory=list, alias="unassignedStudents")
    unassigned_subjects: List[Subject] = Field(default_factory=list, alias="unassignedSubjects")
    current_class_id: Optional[str] = Field(default=None, alias="currentClassId")
    last_modified: int = Field(default_factory=now_ms, alias="lastModified")


class LegacyAppState(_Model):
    """The single-bucket document written before classes existed."""
    students: List[Student] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list)


class ClassExport(LegacyAppState):
    """Export file for one scope: legacy shape plus metadata."""
    version: str = STORAGE_VERSION
    export_date: str = Field(alias="exportDate")


class AllClassesExport(_Model):
    """Export file for the whole document."""
    version: str = STORAGE_VERSION
    export_date: str = Field(alias="exportDate")
    classes: List[ClassData] = Field(default_factory=list)
    unassigned_students: List[Student] = Field(default_factory=list, alias="unassignedStudents")
    unassigned_subjects: List[Subject] = Field(default_factory=list, alias="unassignedSubjects")
