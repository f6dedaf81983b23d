"""
app/scheduler/jobs.py

APScheduler-based periodic Oracle sync.

Schedule
--------
  oracle_sync: every ORACLE_SYNC_INTERVAL_MINUTES (default 60)

Lifecycle
---------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
The FastAPI ``lifespan`` in main.py starts it only when ORACLE_SYNC_ENABLED
is true and shuts it down on exit.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.api.dependencies import get_anomaly_repository
from app.config import get_oracle_sync_settings
from app.domain.errors import AnomalyIngestionError
from app.services.anomaly_ingestion_service import get_anomaly_ingestion_service

logger = logging.getLogger(__name__)


def run_oracle_sync() -> None:
    """
    Pull the Oracle feed and ingest it.

    Failures are logged and swallowed so one bad run does not unschedule the job.
    """
    logger.info("Scheduler: oracle_sync starting")
    try:
        summary = get_anomaly_ingestion_service().sync_oracle(
            repository=get_anomaly_repository(),
        )
    except AnomalyIngestionError as exc:
        logger.warning("Scheduler: oracle_sync failed: %s", exc)
        return

    logger.info(
        "Scheduler: oracle_sync complete submitted=%s processed=%s",
        summary.submitted,
        summary.processed,
    )


def build_scheduler() -> BackgroundScheduler:
    """
    Build and register the periodic Oracle sync job.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    """
    settings = get_oracle_sync_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_oracle_sync,
        trigger="interval",
        minutes=settings.interval_minutes,
        id="oracle_sync",
        name="Oracle anomaly sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=settings.interval_minutes * 60,
    )

    return scheduler
