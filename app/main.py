from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI

from app.api.dependencies import get_anomaly_repository
from app.repositories.anomaly_repository import AnomalyRepository
from app.schemas.anomaly import HealthResponse


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Start the Oracle sync scheduler when enabled; release the pool on exit."""
    from app.config import get_oracle_sync_settings
    from app.scheduler.jobs import build_scheduler
    from db.session import dispose_engine

    log = logging.getLogger(__name__)
    scheduler = None
    if get_oracle_sync_settings().enabled:
        scheduler = build_scheduler()
        scheduler.start()
        log.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=True)
            log.info("Scheduler shut down")
        dispose_engine()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Maintenance Anomaly Ingestion API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import anomalies_router, ingestion_router

    application.include_router(ingestion_router)
    application.include_router(anomalies_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(
        repository: AnomalyRepository = Depends(get_anomaly_repository),
    ) -> HealthResponse:
        database_ok = repository.ping()
        return HealthResponse(
            status="ok" if database_ok else "degraded",
            database=database_ok,
        )

    return application


app = create_app()
