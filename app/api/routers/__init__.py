"""
app/api/routers package marker.
"""

from app.api.routers.anomalies import router as anomalies_router
from app.api.routers.ingestion import router as ingestion_router

__all__ = [
    "anomalies_router",
    "ingestion_router",
]
