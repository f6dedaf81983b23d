"""
app/api/routers/ingestion.py

Anomaly ingestion HTTP endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_anomaly_repository, get_response_preview_size
from app.domain.anomaly import IngestionSummary
from app.domain.errors import (
    AnomalyPersistenceError,
    IngestionValidationError,
    SourceNotImplementedError,
)
from app.repositories.anomaly_repository import AnomalyRepository
from app.schemas.anomaly import AnomalyResponse, IngestionResponse, ProcessRequest, UploadRequest
from app.services.anomaly_ingestion_service import (
    AnomalyIngestionService,
    get_anomaly_ingestion_service,
)

router = APIRouter(tags=["ingestion"])


@router.post("/process", response_model=IngestionResponse)
def process_data(
    body: ProcessRequest,
    repository: AnomalyRepository = Depends(get_anomaly_repository),
    ingestion_service: AnomalyIngestionService = Depends(get_anomaly_ingestion_service),
    preview_size: int = Depends(get_response_preview_size),
) -> IngestionResponse:
    """
    Normalize and store anomalies submitted for one source (excel, oracle, manual).
    """

    try:
        summary = ingestion_service.process(
            repository=repository,
            source=body.source,
            data=body.data,
            file_path=body.file_path,
        )
    except IngestionValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SourceNotImplementedError as exc:
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(exc)) from exc
    except AnomalyPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist anomalies.",
        ) from exc

    return _to_response(
        summary,
        message=f"Successfully processed {summary.processed} anomalies",
        preview_size=preview_size,
    )


@router.post("/upload", response_model=IngestionResponse)
def upload_file(
    body: UploadRequest,
    repository: AnomalyRepository = Depends(get_anomaly_repository),
    ingestion_service: AnomalyIngestionService = Depends(get_anomaly_ingestion_service),
    preview_size: int = Depends(get_response_preview_size),
) -> IngestionResponse:
    """
    Ingest a base64-encoded Excel workbook.
    """

    try:
        summary = ingestion_service.upload(
            repository=repository,
            file=body.file,
            filename=body.filename,
            file_type=body.type,
        )
    except IngestionValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AnomalyPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist anomalies.",
        ) from exc

    return _to_response(
        summary,
        message=f"File processed successfully: {summary.processed} anomalies saved",
        preview_size=preview_size,
        filename=body.filename,
    )


@router.post("/sync/oracle", response_model=IngestionResponse)
def sync_oracle(
    repository: AnomalyRepository = Depends(get_anomaly_repository),
    ingestion_service: AnomalyIngestionService = Depends(get_anomaly_ingestion_service),
    preview_size: int = Depends(get_response_preview_size),
) -> IngestionResponse:
    """
    Run one Oracle sync on demand.
    """

    try:
        summary = ingestion_service.sync_oracle(repository=repository)
    except SourceNotImplementedError as exc:
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(exc)) from exc
    except AnomalyPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist anomalies.",
        ) from exc

    message = (
        "Oracle sync completed successfully" if summary.submitted else "No new data from Oracle"
    )
    return _to_response(summary, message=message, preview_size=preview_size)


def _to_response(
    summary: IngestionSummary,
    *,
    message: str,
    preview_size: int,
    filename: str | None = None,
) -> IngestionResponse:
    return IngestionResponse(
        message=message,
        source=summary.source,
        filename=filename,
        submitted=summary.submitted,
        processed=summary.processed,
        data=[AnomalyResponse.model_validate(row) for row in summary.persisted[:preview_size]],
        timestamp=datetime.now(timezone.utc),
    )
