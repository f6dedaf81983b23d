"""
app/domain/errors.py

Exception hierarchy for anomaly ingestion.

Batch-level errors propagate to the caller. Record-level errors are caught
by the service or repository that raised them and turned into per-record
outcomes, so they never abort a batch.
"""

from __future__ import annotations


class AnomalyIngestionError(Exception):
    """Base exception for anomaly ingestion failures."""


class IngestionValidationError(AnomalyIngestionError, ValueError):
    """Raised when a batch is rejected wholesale (empty batch, bad request shape)."""


class UnknownSourceError(IngestionValidationError):
    """Raised when a source type is not one of excel, oracle, manual."""

    def __init__(self, source: object) -> None:
        super().__init__(f"Unknown source: {source}")
        self.source = source


class SpreadsheetReadError(IngestionValidationError):
    """Raised when a workbook cannot be turned into raw records."""


class RecordReconciliationError(AnomalyIngestionError):
    """Raised when one raw record cannot be reconciled into a canonical anomaly."""


class RecordInsertError(AnomalyIngestionError):
    """Raised when the store rejects one anomaly (constraint violation, bad value)."""


class AnomalyPersistenceError(AnomalyIngestionError, RuntimeError):
    """
    Raised when a batch transaction cannot be committed.

    The batch is rolled back in full; the database error is kept on __cause__.
    """


class SourceNotImplementedError(AnomalyIngestionError, NotImplementedError):
    """Raised when live connectivity to the enterprise source is requested."""
