"""
app/domain/anomaly.py

Domain models used by the anomaly normalization and persistence flow.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from db.models.anomaly import Anomaly


@dataclass(frozen=True)
class CanonicalAnomaly:
    """
    Source-independent anomaly record prepared for persistence.
    """

    id: uuid.UUID
    equipment_number: str | None
    title: str | None
    description: str | None
    detection_date: datetime
    status: str
    priority: int
    equipment_description: str | None
    responsible_section: str | None
    criticality: str
    origin_system: str
    created_at: datetime
    updated_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReconciliationOutcome:
    """
    Result of reconciling one raw record: either an anomaly or a failure reason.
    """

    index: int
    anomaly: CanonicalAnomaly | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.anomaly is not None


class RecordSaveStatus:
    PERSISTED = "persisted"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass(frozen=True)
class RecordSaveOutcome:
    """
    What happened to one anomaly inside a batch save.
    """

    anomaly_id: uuid.UUID
    status: str
    row: Anomaly | None = None
    reason: str | None = None


@dataclass(frozen=True)
class BatchSaveResult:
    """
    Per-record outcomes of one committed batch, in input order.
    """

    outcomes: tuple[RecordSaveOutcome, ...] = ()

    @property
    def persisted(self) -> list[Anomaly]:
        return [
            outcome.row
            for outcome in self.outcomes
            if outcome.status == RecordSaveStatus.PERSISTED and outcome.row is not None
        ]

    @property
    def duplicate_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == RecordSaveStatus.DUPLICATE)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == RecordSaveStatus.FAILED)


@dataclass(frozen=True)
class AnomalyFilters:
    """
    Optional read filters; every supplied filter is applied conjunctively.
    """

    status: str | None = None
    priority: int | None = None
    equipment_number: str | None = None
    section: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    criticality: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class AnomalyStatistics:
    """
    Aggregate counters over the whole anomaly store.
    """

    total_anomalies: int = 0
    new_count: int = 0
    in_progress_count: int = 0
    resolved_count: int = 0
    critical_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    unique_equipment: int = 0
    unique_sections: int = 0


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-batch summary: how many records were submitted versus persisted.
    """

    source: str
    submitted: int
    normalized: int
    persisted: list[Anomaly] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.persisted)
