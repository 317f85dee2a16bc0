"""
Tests for the subject taxonomy helpers.
"""

import pytest

from zeugnis.core.exceptions import ValidationError
from zeugnis.core.taxonomy import (
    add_competency, competency_ids, initial_subjects, mint_competency_id,
    update_category_name, update_competency_text
)


def test_initial_subjects():
    subjects = initial_subjects()

    assert [s.name for s in subjects][:2] == ["Deutsch", "Mathematik"]
    assert all(s.categories for s in subjects)


def test_initial_subjects_returns_fresh_copies():
    assert initial_subjects() is not initial_subjects()
    assert initial_subjects() == initial_subjects()


def test_competency_ids_are_unique():
    subjects = initial_subjects()
    ids = [
        c.id
        for s in subjects for cat in s.categories for c in cat.competencies
    ]

    assert len(ids) == len(set(ids)) == len(competency_ids(subjects))


def test_mint_competency_id():
    subjects = initial_subjects()

    new_id = mint_competency_id(subjects)

    assert new_id.startswith("comp-")
    assert new_id not in competency_ids(subjects)


def test_add_competency():
    subjects = initial_subjects()
    subject = subjects[0]
    category = subject.categories[0]

    updated = add_competency(subjects, subject.id, category.id, "  erzählt frei  ")

    new_competency = updated[0].categories[0].competencies[-1]
    assert new_competency.text == "erzählt frei"
    assert len(updated[0].categories[0].competencies) == len(category.competencies) + 1
    assert subjects == initial_subjects()


def test_add_competency_rejects_blank_text_and_unknown_category():
    subjects = initial_subjects()

    with pytest.raises(ValidationError):
        add_competency(subjects, subjects[0].id, subjects[0].categories[0].id, " ")
    with pytest.raises(ValidationError):
        add_competency(subjects, subjects[0].id, "missing", "Text")


def test_update_competency_text_keeps_id():
    subjects = initial_subjects()
    subject = subjects[1]
    category = subject.categories[0]
    competency = category.competencies[0]

    updated = update_competency_text(subjects, subject.id, category.id, competency.id, "Neu")

    changed = updated[1].categories[0].competencies[0]
    assert changed.id == competency.id
    assert changed.text == "Neu"


def test_update_category_name():
    subjects = initial_subjects()
    subject = subjects[0]
    category = subject.categories[0]

    updated = update_category_name(subjects, subject.id, category.id, "Sprechen")

    assert updated[0].categories[0].name == "Sprechen"
    assert updated[0].categories[0].id == category.id
