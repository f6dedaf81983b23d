"""
tests/test_api_routes.py

HTTP contract tests for the ingestion and query routes (FastAPI TestClient,
SQLite-backed repository injected through dependency overrides).
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies import get_anomaly_repository, get_response_preview_size
from app.connectors.base import BaseSourceConnector, SourceFetchResult
from app.domain.errors import SourceNotImplementedError
from app.main import create_app
from app.repositories.anomaly_repository import AnomalyRepository
from app.services.anomaly_ingestion_service import (
    AnomalyIngestionService,
    get_anomaly_ingestion_service,
)


class _OfflineOracleConnector(BaseSourceConnector):
    def __init__(self) -> None:
        super().__init__(source="oracle")

    def fetch_records(self) -> SourceFetchResult:
        raise SourceNotImplementedError("Oracle connection not implemented yet")


class _FailingCommitSession(Session):
    def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))


def _client(
    repository: AnomalyRepository,
    service: AnomalyIngestionService | None = None,
) -> TestClient:
    application = create_app()
    application.dependency_overrides[get_anomaly_repository] = lambda: repository
    application.dependency_overrides[get_anomaly_ingestion_service] = (
        lambda: service or AnomalyIngestionService()
    )
    application.dependency_overrides[get_response_preview_size] = lambda: 2
    return TestClient(application)


@pytest.fixture
def client(repository: AnomalyRepository) -> Iterator[TestClient]:
    yield _client(repository)


def test_process_manual_record(client: TestClient) -> None:
    response = client.post(
        "/process",
        json={
            "source": "manual",
            "data": {"equipment_number": "EQ-1", "title": "Leak", "priority": "urgent"},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["source"] == "manual"
    assert body["submitted"] == 1
    assert body["processed"] == 1
    assert body["message"] == "Successfully processed 1 anomalies"
    assert body["data"][0]["priority"] == 1
    assert body["data"][0]["criticality"] == "critical"
    assert body["data"][0]["status"] == "new"


def test_process_preview_is_truncated(client: TestClient) -> None:
    response = client.post("/process", json={"source": "oracle"})

    assert response.status_code == 200
    body = response.json()
    assert body["processed"] == 3
    assert len(body["data"]) == 2


def test_process_accepts_camel_case_file_path(client: TestClient, tmp_path) -> None:
    response = client.post(
        "/process",
        json={"source": "excel", "filePath": str(tmp_path / "missing.xlsx")},
    )

    assert response.status_code == 400
    assert "Excel processing failed" in response.json()["detail"]


def test_process_unknown_source_is_bad_request(client: TestClient) -> None:
    response = client.post("/process", json={"source": "sap", "data": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown source: sap"


def test_process_empty_batch_is_bad_request(client: TestClient) -> None:
    response = client.post("/process", json={"source": "manual", "data": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "No data to process"


def test_process_commit_failure_is_server_error(engine) -> None:
    failing_factory = sessionmaker(bind=engine, class_=_FailingCommitSession, expire_on_commit=False)
    client = _client(AnomalyRepository(failing_factory))

    response = client.post("/process", json={"source": "manual", "data": {"title": "Leak"}})

    assert response.status_code == 500


def test_upload_requires_file_and_filename(client: TestClient) -> None:
    response = client.post("/upload", json={"filename": "batch.xlsx"})

    assert response.status_code == 400
    assert response.json()["detail"] == "File and filename are required"


def test_upload_rejects_unsupported_type(client: TestClient) -> None:
    response = client.post("/upload", json={"file": "aGVsbG8=", "filename": "batch.csv", "type": "csv"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported file type: csv"


def test_sync_oracle_runs_simulated_feed(client: TestClient) -> None:
    response = client.post("/sync/oracle")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Oracle sync completed successfully"
    assert body["processed"] == 3


def test_sync_oracle_without_connectivity_is_not_implemented(repository: AnomalyRepository) -> None:
    client = _client(repository, AnomalyIngestionService(oracle_connector=_OfflineOracleConnector()))

    response = client.post("/sync/oracle")

    assert response.status_code == 501


def test_list_anomalies_with_status_and_limit(client: TestClient) -> None:
    client.post(
        "/process",
        json={
            "source": "manual",
            "data": [
                {"equipment_number": f"EQ-{index}", "title": "Leak", "detection_date": f"2024-01-{index + 10}"}
                for index in range(7)
            ]
            + [{"equipment_number": "EQ-R", "title": "Done", "status": "resolved"}],
        },
    )

    response = client.get("/anomalies", params={"status": "new", "limit": "5"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 5
    assert all(row["status"] == "new" for row in body["data"])
    assert [row["equipment_number"] for row in body["data"]] == ["EQ-6", "EQ-5", "EQ-4", "EQ-3", "EQ-2"]


def test_list_anomalies_rejects_non_positive_limit(client: TestClient) -> None:
    response = client.get("/anomalies", params={"limit": 0})

    assert response.status_code == 422


def test_statistics(client: TestClient) -> None:
    client.post("/process", json={"source": "oracle"})

    response = client.get("/anomalies/statistics")

    assert response.status_code == 200
    body = response.json()
    assert body["total_anomalies"] == 3
    assert body["new_count"] == 2
    assert body["in_progress_count"] == 1
    assert body["critical_count"] == 2
    assert body["unique_equipment"] == 3


def test_health_reports_database_state(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": True}
