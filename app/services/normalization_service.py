"""
app/services/normalization_service.py

Batch normalization of raw anomaly records into canonical anomalies.

Each record is reconciled independently. A record that cannot be reconciled
is logged and skipped; survivors keep their relative input order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from app.config import get_anomaly_ingestion_settings
from app.domain.anomaly import CanonicalAnomaly, ReconciliationOutcome
from app.domain.errors import RecordReconciliationError
from app.mappers.anomaly_field_mapper import AnomalyFieldMapper, normalize_source

logger = logging.getLogger(__name__)


class NormalizationService:
    """
    Applies the field mapper to every record of a batch, isolating failures.
    """

    def __init__(
        self,
        *,
        mapper: AnomalyFieldMapper | None = None,
        log_reconciliation_errors: bool = True,
    ) -> None:
        self._mapper = mapper or AnomalyFieldMapper()
        self._log_reconciliation_errors = log_reconciliation_errors

    def normalize(
        self,
        raw_records: Sequence[Mapping[str, Any]],
        source: str,
    ) -> list[CanonicalAnomaly]:
        """
        Return the successfully reconciled anomalies, in input order.

        Raises UnknownSourceError before touching any record when ``source``
        is not a supported origin system.
        """

        outcomes = self.reconcile_all(raw_records, source)
        normalized = [outcome.anomaly for outcome in outcomes if outcome.anomaly is not None]
        logger.info(
            "Normalized anomalies source=%s submitted=%s normalized=%s skipped=%s",
            source,
            len(outcomes),
            len(normalized),
            len(outcomes) - len(normalized),
        )
        return normalized

    def reconcile_all(
        self,
        raw_records: Sequence[Mapping[str, Any]],
        source: str,
    ) -> list[ReconciliationOutcome]:
        """
        Reconcile every record and return one outcome per input record.
        """

        origin = normalize_source(source)
        logger.info("Normalizing %s records from %s", len(raw_records), origin)
        return [
            self._reconcile_one(index=index, raw=raw, source=origin)
            for index, raw in enumerate(raw_records)
        ]

    def _reconcile_one(
        self,
        *,
        index: int,
        raw: Mapping[str, Any],
        source: str,
    ) -> ReconciliationOutcome:
        try:
            anomaly = self._mapper.reconcile(raw, source)
        except RecordReconciliationError as exc:
            if self._log_reconciliation_errors:
                logger.warning(
                    "Skipping unreconcilable record source=%s index=%s reason=%s",
                    source,
                    index,
                    exc,
                )
            return ReconciliationOutcome(index=index, error=str(exc))
        return ReconciliationOutcome(index=index, anomaly=anomaly)


@lru_cache(maxsize=1)
def get_normalization_service() -> NormalizationService:
    """
    Build and cache the normalization service with env-driven settings.
    """

    settings = get_anomaly_ingestion_settings()
    return NormalizationService(
        log_reconciliation_errors=settings.log_reconciliation_errors,
    )
