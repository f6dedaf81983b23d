"""
app/normalization/value_canonicalizers.py

Pure functions that map free-form source values onto canonical anomaly values.

None of these functions raise on bad input: unparseable values fall back to
the canonical default (absent string, ingestion time, ``new``, priority 2).
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from typing import Any

from db.models.anomaly import AnomalyStatus, Criticality

DEFAULT_STATUS = AnomalyStatus.NEW
DEFAULT_PRIORITY = 2
MIN_PRIORITY = 1
MAX_PRIORITY = 5

# Tried after ISO-8601, on each separator variant of the input.
# Day-first comes before month-first: the French sources write DD/MM/YYYY.
# The upstream maintenance tool read 03/04/2024 month-first (4 March), so rows
# it stored for ambiguous dates will not match what this parser produces.
DATE_FORMATS: tuple[str, ...] = (
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m-%d-%Y %H:%M:%S",
    "%m-%d-%Y %H:%M",
    "%m-%d-%Y",
    "%d-%m-%y",
)

STATUS_TERMS: dict[str, str] = {
    # French
    "terminé": AnomalyStatus.RESOLVED,
    "termine": AnomalyStatus.RESOLVED,
    "résolu": AnomalyStatus.RESOLVED,
    "resolu": AnomalyStatus.RESOLVED,
    "en cours": AnomalyStatus.IN_PROGRESS,
    "encours": AnomalyStatus.IN_PROGRESS,
    "nouveau": AnomalyStatus.NEW,
    "fermé": AnomalyStatus.CLOSED,
    "ferme": AnomalyStatus.CLOSED,
    "annulé": AnomalyStatus.CANCELLED,
    "annule": AnomalyStatus.CANCELLED,
    # English
    "completed": AnomalyStatus.RESOLVED,
    "resolved": AnomalyStatus.RESOLVED,
    "in progress": AnomalyStatus.IN_PROGRESS,
    "in_progress": AnomalyStatus.IN_PROGRESS,
    "pending": AnomalyStatus.IN_PROGRESS,
    "new": AnomalyStatus.NEW,
    "open": AnomalyStatus.NEW,
    "closed": AnomalyStatus.CLOSED,
    "cancelled": AnomalyStatus.CANCELLED,
    "canceled": AnomalyStatus.CANCELLED,
}

PRIORITY_TERMS: dict[str, int] = {
    "critique": 1,
    "critical": 1,
    "urgent": 1,
    "haute": 1,
    "high": 1,
    "élevé": 1,
    "eleve": 1,
    "moyenne": 2,
    "medium": 2,
    "moyen": 2,
    "normale": 2,
    "normal": 2,
    "basse": 3,
    "low": 3,
    "faible": 3,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clean_string(value: Any) -> str | None:
    """
    Return the trimmed string form of ``value``, or None when nothing is left.
    """

    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    cleaned = str(value).strip()
    return cleaned or None


def parse_date(value: Any, *, now: datetime | None = None) -> datetime:
    """
    Parse a detection date into a timezone-aware datetime.

    Strings are tried as written, then with ``/`` and then ``.`` replaced by
    ``-``. Numbers are epoch milliseconds. Anything that does not parse
    yields ``now`` (the ingestion time).
    """

    fallback = now or datetime.now(timezone.utc)

    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, datetime):
        return _ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return fallback
    if not isinstance(value, str):
        return fallback

    raw = value.strip()
    if not raw:
        return fallback

    for candidate in _separator_variants(raw):
        parsed = _parse_date_string(candidate)
        if parsed is not None:
            return parsed
    return fallback


def map_status(value: Any) -> str:
    """
    Map a French or English status label onto the canonical status enum.
    """

    if value is None:
        return DEFAULT_STATUS
    return STATUS_TERMS.get(str(value).strip().lower(), DEFAULT_STATUS)


def parse_priority(value: Any) -> int:
    """
    Return a priority in [1, 5].

    Numeric input in range is used as-is; otherwise the lower-cased label is
    looked up in PRIORITY_TERMS. Unknown or absent input gives 2.
    """

    if value is None or isinstance(value, bool):
        return DEFAULT_PRIORITY

    numeric = _leading_int(value)
    if numeric is not None and MIN_PRIORITY <= numeric <= MAX_PRIORITY:
        return numeric

    return PRIORITY_TERMS.get(str(value).strip().lower(), DEFAULT_PRIORITY)


def priority_to_criticality(value: Any) -> str:
    """
    Derive criticality from a raw priority: 1 critical, 2 medium, 3+ low.
    """

    priority = parse_priority(value)
    if priority == 1:
        return Criticality.CRITICAL
    if priority == 2:
        return Criticality.MEDIUM
    if priority >= 3:
        return Criticality.LOW
    return Criticality.MEDIUM


def _leading_int(value: Any) -> int | None:
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def _separator_variants(raw: str) -> list[str]:
    variants: list[str] = []
    for candidate in (raw, raw.replace("/", "-"), raw.replace(".", "-")):
        if candidate not in variants:
            variants.append(candidate)
    return variants


def _parse_date_string(raw: str) -> datetime | None:
    normalized = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return _ensure_utc(datetime.fromisoformat(normalized))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
