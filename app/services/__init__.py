"""
app/services package marker.
"""

from app.services.anomaly_ingestion_service import (
    AnomalyIngestionService,
    get_anomaly_ingestion_service,
)
from app.services.normalization_service import (
    NormalizationService,
    get_normalization_service,
)

__all__ = [
    "AnomalyIngestionService",
    "get_anomaly_ingestion_service",
    "NormalizationService",
    "get_normalization_service",
]
