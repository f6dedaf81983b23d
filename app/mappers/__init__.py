"""
app/mappers package marker.
"""

from app.mappers.anomaly_field_mapper import (
    DEFAULT_FIELD_ALIASES,
    RECONCILED_FIELDS,
    AnomalyFieldMapper,
    normalize_source,
)

__all__ = [
    "DEFAULT_FIELD_ALIASES",
    "RECONCILED_FIELDS",
    "AnomalyFieldMapper",
    "normalize_source",
]
