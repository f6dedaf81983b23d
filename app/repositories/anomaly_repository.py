"""
app/repositories/anomaly_repository.py

Persistence layer for canonical anomalies.

The repository owns no connection of its own: it is handed a session
factory and opens exactly one session per operation, closing it on every
exit path.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy import case, distinct, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.anomaly import (
    AnomalyFilters,
    AnomalyStatistics,
    BatchSaveResult,
    CanonicalAnomaly,
    RecordSaveOutcome,
    RecordSaveStatus,
)
from app.domain.errors import AnomalyPersistenceError, RecordInsertError
from db.models.anomaly import Anomaly, AnomalyStatus, Criticality

logger = logging.getLogger(__name__)


class AnomalyRepository:
    """
    Transactional batch writer and filtered reader for the anomalies table.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        max_limit: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._max_limit = max_limit

    def save(self, anomalies: Sequence[CanonicalAnomaly]) -> list[Anomaly]:
        """
        Persist a batch and return the rows actually inserted.
        """

        return self.save_batch(anomalies).persisted

    def save_batch(self, anomalies: Sequence[CanonicalAnomaly]) -> BatchSaveResult:
        """
        Persist a batch inside one transaction and report every record's outcome.

        Duplicates and rejected inserts are skipped without affecting the
        rest of the batch. If the commit fails, nothing from the batch is
        kept and AnomalyPersistenceError is raised.
        """

        if not anomalies:
            return BatchSaveResult()

        session = self._session_factory()
        try:
            outcomes = tuple(self._save_one(session, anomaly) for anomaly in anomalies)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database transaction error; batch of %s rolled back", len(anomalies))
            raise AnomalyPersistenceError(f"Database save failed: {exc}") from exc
        finally:
            session.close()

        result = BatchSaveResult(outcomes=outcomes)
        logger.info(
            "Saved anomalies persisted=%s duplicates=%s failed=%s submitted=%s",
            len(result.persisted),
            result.duplicate_count,
            result.failed_count,
            len(anomalies),
        )
        return result

    def query(self, filters: AnomalyFilters | None = None) -> list[Anomaly]:
        """
        Return anomalies matching every supplied filter, newest detection first.
        """

        stmt = select(Anomaly)
        conditions = self._filter_conditions(filters or AnomalyFilters())
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = stmt.order_by(Anomaly.detection_date.desc())

        limit = self._effective_limit(filters.limit if filters else None)
        if limit is not None:
            stmt = stmt.limit(limit)

        session = self._session_factory()
        try:
            return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Database query error")
            raise AnomalyPersistenceError(f"Database query failed: {exc}") from exc
        finally:
            session.close()

    def statistics(self) -> AnomalyStatistics:
        """
        Return aggregate status, criticality and cardinality counters.
        """

        stmt = select(
            func.count().label("total_anomalies"),
            self._count_where(Anomaly.status == AnomalyStatus.NEW).label("new_count"),
            self._count_where(Anomaly.status == AnomalyStatus.IN_PROGRESS).label("in_progress_count"),
            self._count_where(Anomaly.status == AnomalyStatus.RESOLVED).label("resolved_count"),
            self._count_where(Anomaly.criticality == Criticality.CRITICAL).label("critical_count"),
            self._count_where(Anomaly.criticality == Criticality.MEDIUM).label("medium_count"),
            self._count_where(Anomaly.criticality == Criticality.LOW).label("low_count"),
            func.count(distinct(Anomaly.equipment_number)).label("unique_equipment"),
            func.count(distinct(Anomaly.responsible_section)).label("unique_sections"),
        ).select_from(Anomaly)

        session = self._session_factory()
        try:
            row = session.execute(stmt).one()
        except SQLAlchemyError as exc:
            logger.exception("Statistics query error")
            raise AnomalyPersistenceError(f"Statistics query failed: {exc}") from exc
        finally:
            session.close()

        return AnomalyStatistics(**{key: int(value or 0) for key, value in row._mapping.items()})

    def ping(self) -> bool:
        """
        Return True when a trivial query round-trips; never raises.
        """

        session = self._session_factory()
        try:
            session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning("Database connection test failed: %s", exc)
            return False
        finally:
            session.close()

    def _save_one(self, session: Session, anomaly: CanonicalAnomaly) -> RecordSaveOutcome:
        # One SAVEPOINT per record: a rejected insert rolls back only itself.
        duplicate_id = None
        row: Anomaly | None = None
        try:
            with session.begin_nested():
                duplicate_id = self._find_duplicate_id(session, anomaly)
                if duplicate_id is None:
                    row = self._insert(session, anomaly)
        except RecordInsertError as exc:
            logger.warning("Error saving anomaly id=%s: %s", anomaly.id, exc)
            return RecordSaveOutcome(
                anomaly_id=anomaly.id,
                status=RecordSaveStatus.FAILED,
                reason=str(exc),
            )
        except SQLAlchemyError as exc:
            logger.warning("Duplicate check failed for anomaly id=%s: %s", anomaly.id, exc)
            return RecordSaveOutcome(
                anomaly_id=anomaly.id,
                status=RecordSaveStatus.FAILED,
                reason=str(exc),
            )

        if duplicate_id is not None:
            logger.info(
                "Skipping duplicate anomaly for %s: %s (existing id=%s)",
                anomaly.equipment_number,
                anomaly.title,
                duplicate_id,
            )
            return RecordSaveOutcome(anomaly_id=anomaly.id, status=RecordSaveStatus.DUPLICATE)

        return RecordSaveOutcome(anomaly_id=anomaly.id, status=RecordSaveStatus.PERSISTED, row=row)

    @staticmethod
    def _find_duplicate_id(session: Session, anomaly: CanonicalAnomaly) -> Any:
        # SQL NULL never equals NULL: records without equipment or title are never duplicates.
        if anomaly.equipment_number is None or anomaly.title is None:
            return None

        stmt = (
            select(Anomaly.id)
            .where(
                Anomaly.equipment_number == anomaly.equipment_number,
                Anomaly.title == anomaly.title,
                func.date(Anomaly.detection_date) == func.date(anomaly.detection_date),
                Anomaly.status != AnomalyStatus.RESOLVED,
            )
            .limit(1)
        )
        return session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _insert(session: Session, anomaly: CanonicalAnomaly) -> Anomaly:
        row = Anomaly(**anomaly.to_payload())
        try:
            session.add(row)
            session.flush()
        except SQLAlchemyError as exc:
            raise RecordInsertError(f"Insert rejected: {exc.__class__.__name__}: {exc}") from exc
        return row

    def _filter_conditions(self, filters: AnomalyFilters) -> list[Any]:
        conditions: list[Any] = []
        if filters.status:
            conditions.append(Anomaly.status == filters.status)
        if filters.priority is not None:
            conditions.append(Anomaly.priority == filters.priority)
        if filters.equipment_number:
            conditions.append(Anomaly.equipment_number.icontains(filters.equipment_number, autoescape=True))
        if filters.section:
            conditions.append(Anomaly.responsible_section.icontains(filters.section, autoescape=True))
        if filters.start_date is not None:
            conditions.append(Anomaly.detection_date >= filters.start_date)
        if filters.end_date is not None:
            conditions.append(Anomaly.detection_date <= filters.end_date)
        if filters.criticality:
            conditions.append(Anomaly.criticality == filters.criticality)
        return conditions

    def _effective_limit(self, limit: int | None) -> int | None:
        if limit is None or limit <= 0:
            return None
        if self._max_limit is not None:
            return min(limit, self._max_limit)
        return limit

    @staticmethod
    def _count_where(condition: Any) -> Any:
        return func.count(case((condition, 1)))
