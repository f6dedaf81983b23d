"""
app/repositories package marker.
"""

from app.repositories.anomaly_repository import AnomalyRepository

__all__ = [
    "AnomalyRepository",
]
