"""
Shared environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy.engine import URL

_DEFAULT_DB_PORT = 5432
_DEFAULT_DB_NAME = "anomalies"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's recommended psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _compose_url_from_parts() -> str | None:
    """
    Build a URL from discrete DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD
    variables, the layout used by the container deployment.
    """

    host = os.getenv("DB_HOST", "").strip()
    user = os.getenv("DB_USER", "").strip()
    if not host and not user:
        return None

    raw_port = os.getenv("DB_PORT", "").strip()
    try:
        port = int(raw_port) if raw_port else _DEFAULT_DB_PORT
    except ValueError:
        port = _DEFAULT_DB_PORT

    url = URL.create(
        "postgresql+psycopg",
        username=user or None,
        password=os.getenv("DB_PASSWORD") or None,
        host=host or "localhost",
        port=port,
        database=os.getenv("DB_NAME", "").strip() or _DEFAULT_DB_NAME,
    )
    return url.render_as_string(hide_password=False)


def resolve_database_url() -> str:
    """
    Resolve database URL using environment variables and optional .env files.

    Priority:
    1) DATABASE_URL
    2) CLOUD_DATABASE_URL when ENVIRONMENT is cloud-like
    3) LOCAL_DATABASE_URL
    4) DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url:
        return normalize_postgres_url(direct_url)

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    cloud_like_envs = {"prod", "production", "staging", "cloud"}

    cloud_url = os.getenv("CLOUD_DATABASE_URL")
    if environment in cloud_like_envs and cloud_url:
        return normalize_postgres_url(cloud_url)

    local_url = os.getenv("LOCAL_DATABASE_URL")
    if local_url:
        return normalize_postgres_url(local_url)

    composed_url = _compose_url_from_parts()
    if composed_url:
        return composed_url

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL, or provide DB_HOST and DB_USER."
    )
