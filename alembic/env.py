"""
alembic.env

Alembic migration environment configuration.

Responsibilities:
- Provide metadata discovery for autogeneration.
- Configure offline/online migration execution against the platform database.

Notes:
- This module is executed by Alembic, not imported by the FastAPI runtime.
- Migrations run with a sync driver; an async URL (`+asyncpg`, `+aiosqlite`) is
  mapped to its sync counterpart.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from slambase_admin.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from slambase_admin.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_SYNC_DRIVERS = {"+asyncpg": "+psycopg", "+aiosqlite": ""}


def _get_database_url() -> str:
    # Read the env var directly: migrations must not require the platform API keys.
    url = os.environ.get("SLAMBASE_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("SLAMBASE_DATABASE_URL is not set")
    for async_driver, sync_driver in _SYNC_DRIVERS.items():
        url = url.replace(async_driver, sync_driver)
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata, render_as_batch=True
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
