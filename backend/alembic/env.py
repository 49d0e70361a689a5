"""Alembic environment: async migration runner for the Easter Eggs ledger tables.

Imports the models package so Base.metadata holds ledger_snapshots and
contract_events before autogenerate runs.

Design Decisions:
    - The URL comes from Settings, so DATABASE_URL and .env behave exactly as
      they do for the API (including the postgresql:// -> asyncpg rewrite)
    - An explicit sqlalchemy.url in alembic.ini wins when DATABASE_URL is unset
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

import eastereggs.models  # noqa: F401
from eastereggs.config import get_settings
from eastereggs.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    ini_url = config.get_main_option("sqlalchemy.url")
    if ini_url and not os.environ.get("DATABASE_URL"):
        return ini_url
    return get_settings().database_url


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _database_url()
    engine = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(_run_with_connection)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(_run_online())
