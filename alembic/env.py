"""
alembic/env.py

Migration environment for the anomalies schema.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection

from db.base import Base
from db.config import load_env_files, normalize_postgres_url, resolve_database_url
from db.models import Anomaly  # noqa: F401  (registers the table on Base.metadata)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _migration_url() -> str:
    """
    Pick the migration target.

    Order: ``-x db_url=...``, ALEMBIC_DATABASE_URL, ``sqlalchemy.url`` from
    alembic.ini, then the application's own resolution (DATABASE_URL,
    CLOUD_DATABASE_URL, LOCAL_DATABASE_URL, DB_HOST and friends).
    """

    load_env_files()

    candidates = (
        context.get_x_argument(as_dictionary=True).get("db_url"),
        os.getenv("ALEMBIC_DATABASE_URL"),
        config.get_main_option("sqlalchemy.url"),
    )
    for candidate in candidates:
        if candidate and candidate.strip():
            url = normalize_postgres_url(candidate.strip())
            break
    else:
        url = resolve_database_url()

    if not url.startswith("postgresql"):
        raise RuntimeError("Anomaly migrations target PostgreSQL URLs only.")
    return url


def _configure(**kwargs: object) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=_migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # A caller may hand over an open connection (e.g. a test harness).
    supplied = config.attributes.get("connection")
    if supplied is not None:
        _run_with_connection(supplied)
        return

    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _migration_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        _run_with_connection(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
