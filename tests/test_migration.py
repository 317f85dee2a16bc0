"""
Tests for legacy assessment migration.
"""

from collections.abc import Mapping

import pytest

from zeugnis.config.settings import Settings, get_settings
from zeugnis.core.exceptions import DataMigrationError
from zeugnis.core.migration import (
    detect_assessment_format, is_click_log_format, is_legacy_format,
    migrate_assessments, migrate_click_log_assessments, migrate_legacy_assessments
)
from zeugnis.core.models import AssessmentFormat, Rating, RatingEvent
from conftest import T0


@pytest.mark.parametrize("assessments,expected", [
    ({"c1": 3}, True),
    ({"c1": [], "c2": 0}, True),
    ({"c1": [{"rating": 3, "timestamp": T0}]}, False),
    ({}, False),
    ([3], False),
    (None, False),
])
def test_is_legacy_format(assessments, expected):
    assert is_legacy_format(assessments) is expected


def test_is_click_log_format():
    assert is_click_log_format({"c1": {"3": [T0], "4": []}})
    assert not is_click_log_format({"c1": [T0]})
    assert not is_click_log_format({"c1": {"gut": [T0]}})


def test_detect_assessment_format():
    assert detect_assessment_format({"c1": 2}) is AssessmentFormat.LEGACY
    assert detect_assessment_format({"c1": {"2": [T0]}}) is AssessmentFormat.CLICK_LOG
    assert detect_assessment_format({"c1": []}) is AssessmentFormat.MODERN
    assert detect_assessment_format("x") is AssessmentFormat.INVALID


def test_migrate_legacy_assessments_shares_one_timestamp():
    migrated = migrate_legacy_assessments({"c1": 3, "c2": 0}, timestamp=T0)

    assert migrated == {
        "c1": [RatingEvent(rating=3, timestamp=T0)],
        "c2": [RatingEvent(rating=0, timestamp=T0)],
    }


def test_migrate_legacy_assessments_default_timestamp():
    migrated = migrate_legacy_assessments({"c1": 3, "c2": 4})

    stamps = {events[0].timestamp for events in migrated.values()}
    assert len(stamps) == 1


def test_migrate_legacy_out_of_range_becomes_empty():
    """A bad rating is not guessed; the history is empty instead."""
    migrated = migrate_legacy_assessments({"c1": 5, "c2": -1, "c3": 2.5}, timestamp=T0)

    assert migrated == {"c1": [], "c2": [], "c3": []}


def test_migrate_legacy_skips_blank_keys():
    migrated = migrate_legacy_assessments({"": 3, "   ": 2, "c1": 1}, timestamp=T0)

    assert list(migrated) == ["c1"]


@pytest.mark.parametrize("data", [None, [("c1", 3)], "c1=3"])
def test_migrate_legacy_unreadable_input(data):
    with pytest.raises(DataMigrationError):
        migrate_legacy_assessments(data)


def test_migrate_click_log_assessments():
    migrated = migrate_click_log_assessments(
        {"c1": {"4": [T0 + 20], "3": [T0, T0 + 10]}},
        timestamp=T0 + 99,
    )

    assert [(e.rating, e.timestamp) for e in migrated["c1"]] == [
        (Rating.PROFICIENT, T0),
        (Rating.PROFICIENT, T0 + 10),
        (Rating.EXCELLENT, T0 + 20),
    ]


def test_migrate_click_log_keeps_clicks_with_bad_time():
    migrated = migrate_click_log_assessments({"c1": {"2": [0, "x"]}}, timestamp=T0)

    assert migrated["c1"] == [
        RatingEvent(rating=2, timestamp=T0),
        RatingEvent(rating=2, timestamp=T0),
    ]


def test_migrate_click_log_invalid_value():
    migrated = migrate_click_log_assessments({"c1": "3"}, timestamp=T0)

    assert migrated == {"c1": []}


def test_migrate_click_log_unreadable_input():
    with pytest.raises(DataMigrationError):
        migrate_click_log_assessments(42)


def test_migrate_assessments_mixed_shapes():
    modern = [{"rating": 1, "timestamp": T0}]

    migrated = migrate_assessments(
        {"v1": 3, "v2": {"4": [T0]}, "v3": modern, "junk": None},
        timestamp=T0 + 5,
    )

    assert migrated["v1"] == [RatingEvent(rating=3, timestamp=T0 + 5)]
    assert migrated["v2"] == [RatingEvent(rating=4, timestamp=T0)]
    assert migrated["v3"] == modern
    assert migrated["junk"] == []


class ExplodingMapping(Mapping):
    def __getitem__(self, key):
        raise RuntimeError("boom")

    def __iter__(self):
        return iter(["c1"])

    def __len__(self):
        return 1


def test_migrate_legacy_exploding_mapping_keeps_original_data():
    data = ExplodingMapping()

    with pytest.raises(DataMigrationError) as exc_info:
        migrate_legacy_assessments(data)

    assert exc_info.value.original_data is data


def test_migration_stamp_stays_inside_an_ended_window(monkeypatch):
    monkeypatch.setenv("ZEUGNIS_MAX_TIMESTAMP", "2025-01-01T00:00:00Z")
    get_settings.cache_clear()

    migrated = migrate_legacy_assessments({"c1": 3})

    assert migrated["c1"][0].timestamp == get_settings().max_timestamp_ms


def test_migration_uses_given_settings_window():
    settings = Settings(min_timestamp="2024-07-01T00:00:00Z")

    migrated = migrate_assessments({"v1": 2, "v2": {"4": [T0]}}, timestamp=T0, settings=settings)

    # T0 lies before the window, so both the shared stamp and the click move to its start
    assert migrated["v1"] == [RatingEvent.create(2, settings.min_timestamp_ms, settings)]
    assert [e.timestamp for e in migrated["v2"]] == [settings.min_timestamp_ms]
