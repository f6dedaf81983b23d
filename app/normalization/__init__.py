"""
app/normalization package marker.
"""

from app.normalization.value_canonicalizers import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    clean_string,
    map_status,
    parse_date,
    parse_priority,
    priority_to_criticality,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "DEFAULT_STATUS",
    "clean_string",
    "map_status",
    "parse_date",
    "parse_priority",
    "priority_to_criticality",
]
