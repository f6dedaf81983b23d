"""
app/domain package marker.
"""

from app.domain.anomaly import (
    AnomalyFilters,
    AnomalyStatistics,
    BatchSaveResult,
    CanonicalAnomaly,
    IngestionSummary,
    ReconciliationOutcome,
    RecordSaveOutcome,
    RecordSaveStatus,
)
from app.domain.errors import (
    AnomalyIngestionError,
    AnomalyPersistenceError,
    IngestionValidationError,
    RecordInsertError,
    RecordReconciliationError,
    SourceNotImplementedError,
    SpreadsheetReadError,
    UnknownSourceError,
)

__all__ = [
    "AnomalyFilters",
    "AnomalyIngestionError",
    "AnomalyPersistenceError",
    "AnomalyStatistics",
    "BatchSaveResult",
    "CanonicalAnomaly",
    "IngestionSummary",
    "IngestionValidationError",
    "ReconciliationOutcome",
    "RecordInsertError",
    "RecordReconciliationError",
    "RecordSaveOutcome",
    "RecordSaveStatus",
    "SourceNotImplementedError",
    "SpreadsheetReadError",
    "UnknownSourceError",
]
