"""
app/connectors/oracle_connector.py

Enterprise maintenance database (Oracle) source.

Live connectivity does not exist yet: fetch_records() serves a fixed
simulated feed shaped like the Oracle export, and connect() /
execute_query() raise SourceNotImplementedError.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from app.connectors.base import BaseSourceConnector, SourceFetchResult
from app.domain.errors import SourceNotImplementedError
from db.models.anomaly import OriginSystem

logger = logging.getLogger(__name__)

SIMULATED_ORACLE_ROWS: tuple[dict[str, Any], ...] = (
    {
        "Num_equipement": "EQ_ORACLE_001",
        "Description": "Vibration anormale détectée",
        "Date de detection de l'anomalie": "2024-01-23T09:30:00Z",
        "Statut": "Nouveau",
        "Priorité": "1",
        "Description equipement": "Pompe centrifuge principale",
        "Section proprietaire": "Maintenance Hydraulique",
    },
    {
        "Num_equipement": "EQ_ORACLE_002",
        "Description": "Température élevée sur roulement",
        "Date de detection de l'anomalie": "2024-01-23T10:15:00Z",
        "Statut": "En cours",
        "Priorité": "2",
        "Description equipement": "Moteur électrique 750KW",
        "Section proprietaire": "Maintenance Électrique",
    },
    {
        "Num_equipement": "EQ_ORACLE_003",
        "Description": "Pression hydraulique insuffisante",
        "Date de detection de l'anomalie": "2024-01-23T11:00:00Z",
        "Statut": "Nouveau",
        "Priorité": "1",
        "Description equipement": "Circuit hydraulique presse",
        "Section proprietaire": "Hydraulique",
    },
)


class OracleSourceConnector(BaseSourceConnector):
    """
    Simulated Oracle feed of maintenance anomalies.
    """

    def __init__(self) -> None:
        super().__init__(source=OriginSystem.ORACLE)

    def fetch_records(self) -> SourceFetchResult:
        logger.info("Fetching data from Oracle (simulated)")
        records = [copy.deepcopy(row) for row in SIMULATED_ORACLE_ROWS]
        logger.info("Fetched %s records from Oracle (simulated)", len(records))
        return SourceFetchResult(source=self.source, records=records, simulated=True)

    def connect(self) -> Any:
        raise SourceNotImplementedError("Oracle connection not implemented yet")

    def execute_query(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        raise SourceNotImplementedError("Oracle query execution not implemented yet")
