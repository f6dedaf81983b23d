"""
tests/test_value_canonicalizers.py

Pytest unit tests for the value canonicalizers.

All tests are pure Python: no database, no I/O.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from app.normalization.value_canonicalizers import (
    clean_string,
    map_status,
    parse_date,
    parse_priority,
    priority_to_criticality,
)

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# clean_string
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("  Pump A  ", "Pump A"),
        ("", None),
        ("   ", None),
        (None, None),
        (math.nan, None),
        (0, "0"),
        (42, "42"),
    ],
)
def test_clean_string(value: object, expected: str | None) -> None:
    assert clean_string(value) == expected


# ---------------------------------------------------------------------------
# parse_date
# ---------------------------------------------------------------------------


def test_parse_date_iso_with_zulu_suffix() -> None:
    parsed = parse_date("2024-01-15T10:30:00Z", now=NOW)
    assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_parse_date_day_first_slashes() -> None:
    assert parse_date("15/01/2024", now=NOW) == datetime(2024, 1, 15, tzinfo=timezone.utc)


def test_parse_date_dotted_with_time() -> None:
    parsed = parse_date("15.01.2024 08:45", now=NOW)
    assert parsed == datetime(2024, 1, 15, 8, 45, tzinfo=timezone.utc)


def test_parse_date_ambiguous_reads_day_first() -> None:
    assert parse_date("03/04/2024", now=NOW) == datetime(2024, 4, 3, tzinfo=timezone.utc)


def test_parse_date_falls_back_to_month_first_when_day_first_is_impossible() -> None:
    assert parse_date("12/25/2023", now=NOW) == datetime(2023, 12, 25, tzinfo=timezone.utc)


def test_parse_date_epoch_milliseconds() -> None:
    assert parse_date(1_705_312_800_000, now=NOW) == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def test_parse_date_passes_datetime_and_date_through() -> None:
    naive = datetime(2024, 2, 1, 9, 0)
    assert parse_date(naive, now=NOW) == datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)
    assert parse_date(date(2024, 2, 1), now=NOW) == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_parse_date_keeps_explicit_offset() -> None:
    parsed = parse_date("2024-01-15T10:00:00+02:00", now=NOW)
    assert parsed.utcoffset() == timedelta(hours=2)


@pytest.mark.parametrize("value", [None, "", "not a date", "32/13/2024", True, {"d": 1}])
def test_parse_date_unparseable_falls_back_to_now(value: object) -> None:
    assert parse_date(value, now=NOW) == NOW


def test_parse_date_without_now_uses_current_time() -> None:
    before = datetime.now(timezone.utc)
    parsed = parse_date("garbage")
    after = datetime.now(timezone.utc)
    assert before <= parsed <= after


# ---------------------------------------------------------------------------
# map_status
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("En cours", "in_progress"),
        ("  TERMINÉ ", "resolved"),
        ("termine", "resolved"),
        ("Résolu", "resolved"),
        ("nouveau", "new"),
        ("Fermé", "closed"),
        ("annulé", "cancelled"),
        ("Completed", "resolved"),
        ("pending", "in_progress"),
        ("open", "new"),
        ("canceled", "cancelled"),
        ("something else", "new"),
        ("", "new"),
        (None, "new"),
    ],
)
def test_map_status(value: object, expected: str) -> None:
    assert map_status(value) == expected


# ---------------------------------------------------------------------------
# parse_priority / priority_to_criticality
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, 1),
        (5, 5),
        ("3", 3),
        (" 4 ", 4),
        (2.7, 2),
        ("urgent", 1),
        ("Haute", 1),
        ("Critique", 1),
        ("moyenne", 2),
        ("BASSE", 3),
        ("faible", 3),
        (0, 2),
        (9, 2),
        ("-1", 2),
        ("unknown", 2),
        (None, 2),
        (True, 2),
    ],
)
def test_parse_priority(value: object, expected: int) -> None:
    assert parse_priority(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, "critical"),
        ("urgent", "critical"),
        (2, "medium"),
        (None, "medium"),
        ("gibberish", "medium"),
        (3, "low"),
        (5, "low"),
        ("basse", "low"),
    ],
)
def test_priority_to_criticality(value: object, expected: str) -> None:
    assert priority_to_criticality(value) == expected


def test_criticality_agrees_with_parsed_priority() -> None:
    for raw in (1, 2, 3, 4, 5, "haute", "normal", "low", None, "??"):
        priority = parse_priority(raw)
        expected = "critical" if priority == 1 else "medium" if priority == 2 else "low"
        assert priority_to_criticality(raw) == expected
