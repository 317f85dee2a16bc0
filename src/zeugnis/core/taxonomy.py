"""
Subject taxonomy helpers.

The taxonomy is a tree subject -> categories -> competencies. Display
texts are editable; ids are stable and never reused, because competency
ids key every student's rating history.
"""

import uuid
from typing import List, Set

from zeugnis.config.constants import COMPETENCY_ID_PREFIX
from zeugnis.core.exceptions import ValidationError
from zeugnis.core.initial_data import INITIAL_SUBJECTS
from zeugnis.core.models import Category, Competency, Subject
from zeugnis.core.timestamps import now_ms


def initial_subjects() -> List[Subject]:
    """Return a fresh copy of the default taxonomy."""
    return [Subject.model_validate(subject) for subject in INITIAL_SUBJECTS]


def competency_ids(subjects: List[Subject]) -> Set[str]:
    """All competency ids of a taxonomy."""
    return {
        competency.id
        for subject in subjects
        for category in subject.categories
        for competency in category.competencies
    }


def mint_competency_id(subjects: List[Subject]) -> str:
    """Create a competency id that does not occur anywhere in the taxonomy."""
    taken = competency_ids(subjects)
    while True:
        candidate = f"{COMPETENCY_ID_PREFIX}-{now_ms()}-{uuid.uuid4().hex[:6]}"
        if candidate not in taken:
            return candidate


def _update_category(subjects: List[Subject], subject_id: str, category_id: str, update) -> List[Subject]:
    found = False
    result = []
    for subject in subjects:
        if subject.id == subject_id:
            categories = []
            for category in subject.categories:
                if category.id == category_id:
                    category = update(category)
                    found = True
                categories.append(category)
            subject = subject.model_copy(update={'categories': categories})
        result.append(subject)
    if not found:
        raise ValidationError(
            f"Category {category_id} not found in subject {subject_id}",
            {'subject_id': subject_id, 'category_id': category_id},
        )
    return result


def add_competency(subjects: List[Subject], subject_id: str, category_id: str, text: str) -> List[Subject]:
    """
    Append a new competency with a freshly minted id to a category.

    Returns:
        New subject list

    Raises:
        ValidationError: If the text is blank or the category does not exist
    """
    if not text or not text.strip():
        raise ValidationError("Competency text must not be empty")
    competency = Competency(id=mint_competency_id(subjects), text=text.strip())

    def append(category: Category) -> Category:
        return category.model_copy(update={'competencies': [*category.competencies, competency]})

    return _update_category(subjects, subject_id, category_id, append)


def update_competency_text(
    subjects: List[Subject],
    subject_id: str,
    category_id: str,
    competency_id: str,
    text: str
) -> List[Subject]:
    """Change the display text of one competency; its id stays the same."""
    def rename(category: Category) -> Category:
        competencies = [
            c.model_copy(update={'text': text}) if c.id == competency_id else c
            for c in category.competencies
        ]
        return category.model_copy(update={'competencies': competencies})

    return _update_category(subjects, subject_id, category_id, rename)


def update_category_name(subjects: List[Subject], subject_id: str, category_id: str, name: str) -> List[Subject]:
    """Change the display name of one category."""
    return _update_category(
        subjects, subject_id, category_id,
        lambda category: category.model_copy(update={'name': name}),
    )
