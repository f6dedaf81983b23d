"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from app.config import get_anomaly_ingestion_settings
from app.repositories.anomaly_repository import AnomalyRepository
from db.session import get_session_factory


def get_anomaly_repository() -> AnomalyRepository:
    """
    Repository bound to the process-wide session factory (and its pool).
    """

    settings = get_anomaly_ingestion_settings()
    return AnomalyRepository(
        get_session_factory(),
        max_limit=settings.query_max_limit,
    )


def get_response_preview_size() -> int:
    return get_anomaly_ingestion_settings().response_preview_size
