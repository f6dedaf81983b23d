"""
app/connectors package marker.
"""

from app.connectors.base import BaseSourceConnector, SourceFetchResult
from app.connectors.oracle_connector import OracleSourceConnector

__all__ = [
    "BaseSourceConnector",
    "OracleSourceConnector",
    "SourceFetchResult",
]
