"""
db/models/anomaly.py

Persisted maintenance anomaly, one row per canonical record.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class AnomalyStatus:
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class Criticality:
    CRITICAL = "critical"
    MEDIUM = "medium"
    LOW = "low"


class OriginSystem:
    EXCEL = "excel"
    ORACLE = "oracle"
    MANUAL = "manual"


ANOMALY_STATUSES: tuple[str, ...] = (
    AnomalyStatus.NEW,
    AnomalyStatus.IN_PROGRESS,
    AnomalyStatus.RESOLVED,
    AnomalyStatus.CLOSED,
    AnomalyStatus.CANCELLED,
)

CRITICALITIES: tuple[str, ...] = (
    Criticality.CRITICAL,
    Criticality.MEDIUM,
    Criticality.LOW,
)

ORIGIN_SYSTEMS: tuple[str, ...] = (
    OriginSystem.EXCEL,
    OriginSystem.ORACLE,
    OriginSystem.MANUAL,
)


def _in_list(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


class Anomaly(Base):
    __tablename__ = "anomalies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    equipment_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    detection_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=AnomalyStatus.NEW,
        comment="new, in_progress, resolved, closed, cancelled",
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    equipment_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    responsible_section: Mapped[str | None] = mapped_column(String(255), nullable=True)
    criticality: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="critical, medium, low",
    )
    origin_system: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="excel, oracle, manual",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="ck_anomalies_priority_range"),
        CheckConstraint(_in_list("status", ANOMALY_STATUSES), name="ck_anomalies_status"),
        CheckConstraint(_in_list("criticality", CRITICALITIES), name="ck_anomalies_criticality"),
        CheckConstraint(_in_list("origin_system", ORIGIN_SYSTEMS), name="ck_anomalies_origin_system"),
        Index("ix_anomalies_equipment_number", "equipment_number"),
        Index("ix_anomalies_status", "status"),
        Index("ix_anomalies_criticality", "criticality"),
        Index("ix_anomalies_detection_date", "detection_date"),
        Index(
            "ix_anomalies_equipment_title_detection_date",
            "equipment_number",
            "title",
            "detection_date",
        ),
    )
