"""
app/services/anomaly_ingestion_service.py

Service layer for anomaly ingestion workflows.

Every workflow ends the same way: raw records are normalized for their
origin system and the survivors are saved as one batch. The returned
IngestionSummary reports submitted versus persisted counts only; which
records were duplicates or failed is visible in the server log.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from app.connectors.base import BaseSourceConnector
from app.connectors.oracle_connector import OracleSourceConnector
from app.domain.anomaly import IngestionSummary
from app.domain.errors import IngestionValidationError
from app.mappers.anomaly_field_mapper import normalize_source
from app.readers.excel_reader import (
    check_expected_headers,
    is_excel_filename,
    read_workbook,
    read_workbook_base64,
)
from app.repositories.anomaly_repository import AnomalyRepository
from app.services.normalization_service import NormalizationService, get_normalization_service
from db.models.anomaly import OriginSystem

logger = logging.getLogger(__name__)


class AnomalyIngestionService:
    """
    Coordinates raw record collection, normalization and persistence.
    """

    def __init__(
        self,
        *,
        normalizer: NormalizationService | None = None,
        oracle_connector: BaseSourceConnector | None = None,
    ) -> None:
        self._normalizer = normalizer or NormalizationService()
        self._oracle_connector = oracle_connector or OracleSourceConnector()

    def process(
        self,
        *,
        repository: AnomalyRepository,
        source: str,
        data: Any = None,
        file_path: str | None = None,
    ) -> IngestionSummary:
        """
        Ingest records submitted for one source.

        excel takes a workbook path or a list of rows; oracle takes a list of
        rows or, when none is given, the simulated Oracle feed; manual takes
        one record or a list.
        """

        origin = normalize_source(source)
        logger.info("Processing data from source: %s", origin)
        raw_records = self._collect_raw_records(origin=origin, data=data, file_path=file_path)
        return self.ingest_records(repository=repository, raw_records=raw_records, source=origin)

    def upload(
        self,
        *,
        repository: AnomalyRepository,
        file: str | None,
        filename: str | None,
        file_type: str | None = None,
    ) -> IngestionSummary:
        """
        Ingest a base64-encoded workbook upload.
        """

        if not file or not filename:
            raise IngestionValidationError("File and filename are required")

        if file_type != OriginSystem.EXCEL and not is_excel_filename(filename):
            raise IngestionValidationError(f"Unsupported file type: {file_type or 'unknown'}")

        raw_records = read_workbook_base64(file, filename=filename)
        check_expected_headers(raw_records)
        return self.ingest_records(
            repository=repository,
            raw_records=raw_records,
            source=OriginSystem.EXCEL,
        )

    def sync_oracle(self, *, repository: AnomalyRepository) -> IngestionSummary:
        """
        Pull the Oracle feed and ingest it; an empty feed is not an error.
        """

        fetched = self._oracle_connector.fetch_records()
        if not fetched.records:
            logger.info("No new data from Oracle simulated=%s", fetched.simulated)
            return IngestionSummary(source=fetched.source, submitted=0, normalized=0)

        summary = self.ingest_records(
            repository=repository,
            raw_records=fetched.records,
            source=fetched.source,
        )
        logger.info(
            "Oracle sync completed: %s records processed simulated=%s",
            summary.processed,
            fetched.simulated,
        )
        return summary

    def ingest_records(
        self,
        *,
        repository: AnomalyRepository,
        raw_records: Sequence[Mapping[str, Any]],
        source: str,
    ) -> IngestionSummary:
        """
        Normalize and save one batch; an empty batch is rejected.
        """

        if not raw_records:
            raise IngestionValidationError("No data to process")

        normalized = self._normalizer.normalize(raw_records, source)
        persisted = repository.save(normalized)
        return IngestionSummary(
            source=source,
            submitted=len(raw_records),
            normalized=len(normalized),
            persisted=persisted,
        )

    def _collect_raw_records(
        self,
        *,
        origin: str,
        data: Any,
        file_path: str | None,
    ) -> list[Any]:
        if origin == OriginSystem.EXCEL:
            if file_path:
                raw_records = read_workbook(file_path)
                check_expected_headers(raw_records)
                return raw_records
            if data is not None:
                return self._as_record_list(data)
            raise IngestionValidationError("Excel processing requires either file_path or data array")

        if origin == OriginSystem.ORACLE:
            if data is not None:
                return self._as_record_list(data)
            return self._oracle_connector.fetch_records().records

        if data is None:
            return []
        if isinstance(data, Mapping):
            return [data]
        return self._as_record_list(data)

    @staticmethod
    def _as_record_list(data: Any) -> list[Any]:
        if isinstance(data, (list, tuple)):
            return list(data)
        raise IngestionValidationError("data must be an array of records")


@lru_cache(maxsize=1)
def get_anomaly_ingestion_service() -> AnomalyIngestionService:
    """
    Build and cache the ingestion service.
    """

    return AnomalyIngestionService(normalizer=get_normalization_service())
