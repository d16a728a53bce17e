"""Alembic environment for the users and tasks schema.

The database URL comes from ``DATABASE_URL`` through the application
settings, never from alembic.ini.
"""

from logging.config import fileConfig

from sqlalchemy import pool
from sqlmodel import SQLModel, create_engine

from alembic import context

from tasktracker.config import get_settings
from tasktracker.db.session import normalize_database_url
from tasktracker.models import Task, User  # noqa: F401  registers both tables

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata
database_url = normalize_database_url(get_settings().DATABASE_URL)


def run_migrations_offline() -> None:
    """Emit the users/tasks DDL as SQL script output without connecting."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection.

    SQLite cannot ALTER most constraints in place, so it migrates in batch mode.
    """
    connectable = create_engine(database_url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
