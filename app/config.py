"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class AnomalyIngestionSettings:
    """
    Runtime settings for anomaly normalization, persistence and reads.
    """

    log_reconciliation_errors: bool = True
    response_preview_size: int = 5
    query_max_limit: int = 1000


@dataclass(frozen=True)
class OracleSyncSettings:
    """
    Scheduled enterprise-source sync settings.
    """

    enabled: bool = False
    interval_minutes: int = 60


@lru_cache(maxsize=1)
def get_anomaly_ingestion_settings() -> AnomalyIngestionSettings:
    """
    Return cached anomaly ingestion settings from environment variables.
    """

    return AnomalyIngestionSettings(
        log_reconciliation_errors=_get_bool_env("ANOMALY_LOG_RECONCILIATION_ERRORS", True),
        response_preview_size=max(0, _get_int_env("ANOMALY_RESPONSE_PREVIEW_SIZE", 5)),
        query_max_limit=max(1, _get_int_env("ANOMALY_QUERY_MAX_LIMIT", 1000)),
    )


@lru_cache(maxsize=1)
def get_oracle_sync_settings() -> OracleSyncSettings:
    """
    Return cached enterprise-source sync settings from environment variables.
    """

    return OracleSyncSettings(
        enabled=_get_bool_env("ORACLE_SYNC_ENABLED", False),
        interval_minutes=max(1, _get_int_env("ORACLE_SYNC_INTERVAL_MINUTES", 60)),
    )
