"""Alembic environment for SVCATALOG.

Policy defaults:
  - compare_type=True (catch column type drift)
  - compare_server_default=True (catch server default drift)
  - render_as_batch=True on SQLite (safe ALTER TABLE emulation)
  - A caller-supplied connection (``config.attributes["connection"]``) is used
    as-is; this is how ``bootstrap.init_schema`` migrates in-memory databases.
  - URL precedence otherwise: `-x url=...` > config sqlalchemy.url > SVCATALOG_DB_URL
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Ensure tables are registered on the metadata so autogenerate sees them
import svcatalog.adapters.storage.schema  # noqa: F401 # pylint: disable=unused-import
from svcatalog.adapters.db.metadata import metadata

# pylint: disable=no-member

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = metadata


def get_url() -> str:
    """Resolve DB URL with precedence: `-x url` > config > env."""
    xargs = context.get_x_argument(as_dictionary=True)
    url = xargs.get("url")

    if not url:
        url = config.get_main_option("sqlalchemy.url")

    if not url or "%(" in url:  # treat placeholder as unset # pylint: disable=R2004
        url = os.environ.get("SVCATALOG_DB_URL")

    if not url:
        raise RuntimeError("Set SVCATALOG_DB_URL to your database URL.")
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL instead of executing it."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:
    is_sqlite = connection.dialect.name == "sqlite"  # pylint: disable=R2004
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    if (connection := config.attributes.get("connection")) is not None:
        _run_with_connection(connection)
        return

    connectable = engine_from_config(
        {"sqlalchemy.url": get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        _run_with_connection(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
