"""
tests/conftest.py

Shared fixtures: an in-memory SQLite store with working SAVEPOINTs and a
factory for canonical anomalies.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  (registers the anomalies table on Base.metadata)
from app.domain.anomaly import CanonicalAnomaly
from app.repositories.anomaly_repository import AnomalyRepository
from db.base import Base

FIXED_NOW = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite issues its own BEGIN lazily, which breaks SAVEPOINT; take over.
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(connection: Any) -> None:
        connection.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False)


@pytest.fixture
def repository(session_factory: sessionmaker) -> AnomalyRepository:
    return AnomalyRepository(session_factory, max_limit=1000)


@pytest.fixture
def make_anomaly() -> Callable[..., CanonicalAnomaly]:
    def _make(**overrides: Any) -> CanonicalAnomaly:
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "equipment_number": "EQ-100",
            "title": "Pump vibration",
            "description": "Abnormal vibration on pump bearing",
            "detection_date": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
            "status": "new",
            "priority": 2,
            "equipment_description": "Centrifugal pump",
            "responsible_section": "Mechanical",
            "criticality": "medium",
            "origin_system": "manual",
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        values.update(overrides)
        return CanonicalAnomaly(**values)

    return _make
