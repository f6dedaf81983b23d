"""
app/mappers/anomaly_field_mapper.py

Source-aware field reconciliation from raw anomaly records to canonical anomalies.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from app.domain.anomaly import CanonicalAnomaly
from app.domain.errors import RecordReconciliationError, UnknownSourceError
from app.normalization.value_canonicalizers import (
    clean_string,
    map_status,
    parse_date,
    parse_priority,
    priority_to_criticality,
)
from db.models.anomaly import ORIGIN_SYSTEMS, OriginSystem

EXCEL = OriginSystem.EXCEL
ORACLE = OriginSystem.ORACLE
MANUAL = OriginSystem.MANUAL

RECONCILED_FIELDS: tuple[str, ...] = (
    "equipment_number",
    "title",
    "description",
    "detection_date",
    "status",
    "priority",
    "equipment_description",
    "responsible_section",
)

# Canonical attribute -> ordered (source, raw field name) candidates.
# The first candidate present in the raw record with a non-blank value wins.
DEFAULT_FIELD_ALIASES: dict[str, tuple[tuple[str, str], ...]] = {
    "equipment_number": (
        (ORACLE, "Num_equipement"),
        (ORACLE, "num_equipement"),
        (ORACLE, "Num_équipement"),
        (EXCEL, "Equipment Number"),
        (EXCEL, "Num_equipement"),
        (EXCEL, "Numéro équipement"),
        (EXCEL, "Numero equipement"),
        (EXCEL, "equipment_number"),
        (MANUAL, "equipment_number"),
    ),
    "title": (
        (ORACLE, "Description"),
        (ORACLE, "description"),
        (EXCEL, "Title"),
        (EXCEL, "Description"),
        (EXCEL, "Titre"),
        (EXCEL, "title"),
        (MANUAL, "title"),
    ),
    "description": (
        (ORACLE, "Description"),
        (ORACLE, "description"),
        (EXCEL, "Description"),
        (EXCEL, "Title"),
        (EXCEL, "description"),
        (EXCEL, "Titre"),
        (EXCEL, "title"),
        (MANUAL, "description"),
        (MANUAL, "title"),
    ),
    "detection_date": (
        (ORACLE, "Date de detection de l'anomalie"),
        (ORACLE, "Date de détection de l'anomalie"),
        (ORACLE, "Date_de_detection_de_l_anomalie"),
        (ORACLE, "detection_date"),
        (EXCEL, "Detection Date"),
        (EXCEL, "Date"),
        (EXCEL, "Date de détection"),
        (EXCEL, "Date de detection"),
        (EXCEL, "detection_date"),
        (MANUAL, "detection_date"),
    ),
    "status": (
        (ORACLE, "Statut"),
        (ORACLE, "statut"),
        (EXCEL, "Status"),
        (EXCEL, "Statut"),
        (EXCEL, "status"),
        (MANUAL, "status"),
    ),
    "priority": (
        (ORACLE, "Priorité"),
        (ORACLE, "Priorite"),
        (ORACLE, "priority"),
        (EXCEL, "Priority"),
        (EXCEL, "Priorité"),
        (EXCEL, "Priorite"),
        (EXCEL, "priority"),
        (MANUAL, "priority"),
    ),
    "equipment_description": (
        (ORACLE, "Description equipement"),
        (ORACLE, "Description équipement"),
        (ORACLE, "Description_equipement"),
        (ORACLE, "equipment_description"),
        (EXCEL, "Equipment Description"),
        (EXCEL, "Description equipement"),
        (EXCEL, "Description équipement"),
        (EXCEL, "equipment_description"),
        (MANUAL, "equipment_description"),
    ),
    "responsible_section": (
        (ORACLE, "Section proprietaire"),
        (ORACLE, "Section propriétaire"),
        (ORACLE, "Section_proprietaire"),
        (ORACLE, "responsible_section"),
        (EXCEL, "Section"),
        (EXCEL, "Section proprietaire"),
        (EXCEL, "Section propriétaire"),
        (EXCEL, "Section responsable"),
        (EXCEL, "responsible_section"),
        (MANUAL, "responsible_section"),
    ),
}


def normalize_source(source: Any) -> str:
    """
    Return the canonical origin system for ``source`` or raise UnknownSourceError.
    """

    if not isinstance(source, str):
        raise UnknownSourceError(source)
    normalized = source.strip().lower()
    if normalized not in ORIGIN_SYSTEMS:
        raise UnknownSourceError(source)
    return normalized


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


class AnomalyFieldMapper:
    """
    Reconciles one raw record into a CanonicalAnomaly using the alias table.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Sequence[tuple[str, str]]] | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ) -> None:
        alias_table = aliases or DEFAULT_FIELD_ALIASES
        self._aliases_by_source: dict[str, dict[str, tuple[str, ...]]] = {
            source: {
                attribute: tuple(name for alias_source, name in candidates if alias_source == source)
                for attribute, candidates in alias_table.items()
            }
            for source in ORIGIN_SYSTEMS
        }
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory

    def aliases_for(self, attribute: str, source: str) -> tuple[str, ...]:
        """
        Ordered raw field names consulted for one attribute of one source.
        """

        return self._aliases_by_source[normalize_source(source)].get(attribute, ())

    def pick(self, raw: Mapping[str, Any], attribute: str, source: str) -> Any:
        """
        Return the first present candidate value for ``attribute``, or None.
        """

        for name in self.aliases_for(attribute, source):
            value = raw.get(name)
            if _is_present(value):
                return value
        return None

    def reconcile(self, raw: Mapping[str, Any], source: str) -> CanonicalAnomaly:
        """
        Map one raw record into a canonical anomaly stamped with a new id and timestamps.
        """

        origin = normalize_source(source)
        if not isinstance(raw, Mapping):
            raise RecordReconciliationError(
                f"Raw record must be a mapping, got {type(raw).__name__}."
            )

        now = self._clock()
        values = {attribute: self.pick(raw, attribute, origin) for attribute in RECONCILED_FIELDS}

        try:
            return CanonicalAnomaly(
                id=self._id_factory(),
                equipment_number=clean_string(values["equipment_number"]),
                title=clean_string(values["title"]),
                description=clean_string(values["description"]),
                detection_date=parse_date(values["detection_date"], now=now),
                status=map_status(values["status"]),
                priority=parse_priority(values["priority"]),
                equipment_description=clean_string(values["equipment_description"]),
                responsible_section=clean_string(values["responsible_section"]),
                criticality=priority_to_criticality(values["priority"]),
                origin_system=origin,
                created_at=now,
                updated_at=now,
            )
        except (TypeError, ValueError) as exc:
            raise RecordReconciliationError(f"Record could not be reconciled: {exc}") from exc
