"""
app/api/routers/anomalies.py

Anomaly query endpoints.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_anomaly_repository
from app.domain.anomaly import AnomalyFilters
from app.domain.errors import AnomalyPersistenceError
from app.repositories.anomaly_repository import AnomalyRepository
from app.schemas.anomaly import AnomalyListResponse, AnomalyResponse, AnomalyStatisticsResponse

router = APIRouter(prefix="/anomalies", tags=["anomalies"])


@router.get("", response_model=AnomalyListResponse)
def list_anomalies(
    status_filter: str | None = Query(default=None, alias="status", description="Exact status"),
    priority: int | None = Query(default=None, ge=1, le=5, description="Exact priority"),
    equipment_number: str | None = Query(default=None, description="Equipment number substring"),
    section: str | None = Query(default=None, description="Responsible section substring"),
    start_date: datetime | None = Query(default=None, description="Detected on or after"),
    end_date: datetime | None = Query(default=None, description="Detected on or before"),
    criticality: str | None = Query(default=None, description="Exact criticality"),
    limit: int | None = Query(default=None, ge=1, description="Maximum rows returned"),
    repository: AnomalyRepository = Depends(get_anomaly_repository),
) -> AnomalyListResponse:
    """
    List anomalies matching all supplied filters, newest detection first.
    """

    filters = AnomalyFilters(
        status=status_filter,
        priority=priority,
        equipment_number=equipment_number,
        section=section,
        start_date=start_date,
        end_date=end_date,
        criticality=criticality,
        limit=limit,
    )
    try:
        rows = repository.query(filters)
    except AnomalyPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to query anomalies.",
        ) from exc

    return AnomalyListResponse(
        count=len(rows),
        data=[AnomalyResponse.model_validate(row) for row in rows],
    )


@router.get("/statistics", response_model=AnomalyStatisticsResponse)
def anomaly_statistics(
    repository: AnomalyRepository = Depends(get_anomaly_repository),
) -> AnomalyStatisticsResponse:
    try:
        stats = repository.statistics()
    except AnomalyPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to compute anomaly statistics.",
        ) from exc

    return AnomalyStatisticsResponse(
        total_anomalies=stats.total_anomalies,
        new_count=stats.new_count,
        in_progress_count=stats.in_progress_count,
        resolved_count=stats.resolved_count,
        critical_count=stats.critical_count,
        medium_count=stats.medium_count,
        low_count=stats.low_count,
        unique_equipment=stats.unique_equipment,
        unique_sections=stats.unique_sections,
    )
