"""
tests/test_anomaly_ingestion_service.py

Pytest tests for AnomalyIngestionService workflows against SQLite.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path

import pytest
from openpyxl import Workbook

from app.connectors.base import BaseSourceConnector, SourceFetchResult
from app.domain.errors import IngestionValidationError, SpreadsheetReadError, UnknownSourceError
from app.services.anomaly_ingestion_service import AnomalyIngestionService


class _EmptyOracleConnector(BaseSourceConnector):
    def __init__(self) -> None:
        super().__init__(source="oracle")

    def fetch_records(self) -> SourceFetchResult:
        return SourceFetchResult(source=self.source, records=[], simulated=True)


def _workbook_bytes(tmp_path: Path) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Equipment Number", "Title", "Status", "Priority", "Detection Date"])
    sheet.append(["EQ-X1", "Cracked weld", "open", 3, "2024-02-01"])
    sheet.append(["EQ-X2", "Oil leak", "Terminé", "urgent", "02/02/2024"])
    path = tmp_path / "anomalies.xlsx"
    workbook.save(path)
    return path.read_bytes()


@pytest.fixture
def service() -> AnomalyIngestionService:
    return AnomalyIngestionService()


def test_manual_single_record_is_normalized_and_saved(service, repository) -> None:
    summary = service.process(
        repository=repository,
        source="manual",
        data={"equipment_number": "EQ-1", "title": "Leak", "priority": "urgent"},
    )

    assert summary.submitted == 1
    assert summary.processed == 1
    row = summary.persisted[0]
    assert row.priority == 1
    assert row.criticality == "critical"
    assert row.status == "new"
    assert row.origin_system == "manual"
    assert row.description == "Leak"


def test_oracle_rows_map_french_status(service, repository) -> None:
    summary = service.process(
        repository=repository,
        source="oracle",
        data=[{"Num_equipement": "EQ-9", "Description": "Bruit", "Statut": "En cours"}],
    )

    assert summary.persisted[0].status == "in_progress"


def test_oracle_without_data_uses_simulated_feed(service, repository) -> None:
    summary = service.process(repository=repository, source="oracle")

    assert summary.submitted == 3
    assert summary.processed == 3


def test_resubmitting_same_batch_persists_nothing_new(service, repository) -> None:
    service.process(repository=repository, source="oracle")

    summary = service.process(repository=repository, source="oracle")

    assert summary.submitted == 3
    assert summary.processed == 0


def test_excel_rows_passed_as_data(service, repository) -> None:
    summary = service.process(
        repository=repository,
        source="EXCEL",
        data=[{"Equipment Number": "EQ-5", "Title": "Corrosion", "Priority": 5}],
    )

    assert summary.source == "excel"
    assert summary.persisted[0].criticality == "low"


def test_excel_from_file_path(service, repository, tmp_path: Path) -> None:
    path = tmp_path / "batch.xlsx"
    path.write_bytes(_workbook_bytes(tmp_path))

    summary = service.process(repository=repository, source="excel", file_path=str(path))

    assert summary.processed == 2
    assert [row.status for row in summary.persisted] == ["new", "resolved"]


def test_excel_without_file_or_data_is_rejected(service, repository) -> None:
    with pytest.raises(IngestionValidationError, match="file_path or data"):
        service.process(repository=repository, source="excel")


def test_unknown_source_is_rejected(service, repository) -> None:
    with pytest.raises(UnknownSourceError):
        service.process(repository=repository, source="sap", data=[{"title": "x"}])


def test_empty_batch_is_rejected(service, repository) -> None:
    with pytest.raises(IngestionValidationError, match="No data to process"):
        service.process(repository=repository, source="manual", data=[])

    with pytest.raises(IngestionValidationError, match="No data to process"):
        service.process(repository=repository, source="manual")


def test_scalar_data_is_rejected(service, repository) -> None:
    with pytest.raises(IngestionValidationError):
        service.process(repository=repository, source="oracle", data="EQ-1")


def test_unreconcilable_records_are_skipped(service, repository) -> None:
    summary = service.process(
        repository=repository,
        source="manual",
        data=[{"title": "Good"}, "not a record", {"title": "Also good"}],
    )

    assert summary.submitted == 3
    assert summary.normalized == 2
    assert summary.processed == 2


def test_upload_base64_workbook(service, repository, tmp_path: Path) -> None:
    payload = base64.b64encode(_workbook_bytes(tmp_path)).decode("ascii")

    summary = service.upload(repository=repository, file=payload, filename="batch.xlsx")

    assert summary.source == "excel"
    assert summary.processed == 2
    assert summary.persisted[1].priority == 1


def test_upload_requires_file_and_filename(service, repository) -> None:
    with pytest.raises(IngestionValidationError, match="File and filename are required"):
        service.upload(repository=repository, file=None, filename="batch.xlsx")


def test_upload_rejects_non_excel_files(service, repository) -> None:
    with pytest.raises(IngestionValidationError, match="Unsupported file type"):
        service.upload(repository=repository, file="aGVsbG8=", filename="batch.csv", file_type="csv")


def test_upload_rejects_legacy_xls_by_extension(service, repository) -> None:
    with pytest.raises(IngestionValidationError, match="Unsupported file type"):
        service.upload(repository=repository, file="aGVsbG8=", filename="legacy.xls")


def test_upload_accepts_explicit_excel_type(service, repository) -> None:
    with pytest.raises(SpreadsheetReadError):
        service.upload(repository=repository, file="aGVsbG8=", filename="batch.bin", file_type="excel")


def test_sync_oracle_ingests_feed(service, repository) -> None:
    summary = service.sync_oracle(repository=repository)

    assert summary.source == "oracle"
    assert summary.processed == 3
    assert {row.origin_system for row in summary.persisted} == {"oracle"}


def test_sync_oracle_with_empty_feed_is_not_an_error(repository) -> None:
    service = AnomalyIngestionService(oracle_connector=_EmptyOracleConnector())

    summary = service.sync_oracle(repository=repository)

    assert summary.submitted == 0
    assert summary.processed == 0


def test_sync_oracle_logs_that_the_feed_is_simulated(service, repository, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="app.services.anomaly_ingestion_service"):
        service.sync_oracle(repository=repository)

    assert "Oracle sync completed: 3 records processed simulated=True" in caplog.text


def test_sync_oracle_empty_feed_logs_simulated_flag(repository, caplog: pytest.LogCaptureFixture) -> None:
    service = AnomalyIngestionService(oracle_connector=_EmptyOracleConnector())

    with caplog.at_level(logging.INFO, logger="app.services.anomaly_ingestion_service"):
        service.sync_oracle(repository=repository)

    assert "No new data from Oracle simulated=True" in caplog.text
