"""
app/schemas package marker.
"""

from app.schemas.anomaly import (
    AnomalyListResponse,
    AnomalyResponse,
    AnomalyStatisticsResponse,
    HealthResponse,
    IngestionResponse,
    ProcessRequest,
    UploadRequest,
)

__all__ = [
    "AnomalyListResponse",
    "AnomalyResponse",
    "AnomalyStatisticsResponse",
    "HealthResponse",
    "IngestionResponse",
    "ProcessRequest",
    "UploadRequest",
]
