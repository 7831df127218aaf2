import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# Every table model has to be imported so it is registered on SQLModel.metadata
from sqlmodel import SQLModel
import maasta.models  # noqa: F401

from maasta.core.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

# Taken from settings instead of alembic.ini so the DSN lives in one place
db_url = settings.ASYNC_DATABASE_URL


def include_object(obj, name, type_, reflected, compare_to):
    """Autogenerate may create and alter, never drop"""
    if obj is None and compare_to is not None:
        return False
    if not reflected and compare_to is None:
        return True
    return reflected and compare_to is not None


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting"""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = db_url

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
