"""Alembic environment — async migrations for the ledger schema.

Invariants:
    - The target database comes from ledger Settings (DATABASE_URL or the
      DATABASE_HOST parts), unless the caller set sqlalchemy.url explicitly
    - The revision table name follows DATABASE_MIGRATION_TABLE
    - SQLite runs in batch mode so ALTERs in later revisions stay portable
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from ledger.config import get_settings
from ledger.db.base import Base
import ledger.models  # noqa: F401  (registers every table on Base.metadata)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
target_metadata = Base.metadata

database_url = config.get_main_option("sqlalchemy.url") or settings.database_url


def _configure_options() -> dict:
    return {
        "target_metadata": target_metadata,
        "version_table": settings.database_migration_table,
        "render_as_batch": database_url.startswith("sqlite"),
        "compare_type": True,
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **_configure_options())
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = database_url
    connectable = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
