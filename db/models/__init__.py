"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.anomaly import (
    ANOMALY_STATUSES,
    CRITICALITIES,
    ORIGIN_SYSTEMS,
    Anomaly,
    AnomalyStatus,
    Criticality,
    OriginSystem,
)

__all__ = [
    "ANOMALY_STATUSES",
    "CRITICALITIES",
    "ORIGIN_SYSTEMS",
    "Anomaly",
    "AnomalyStatus",
    "Criticality",
    "OriginSystem",
]
