"""Configuration utilities for SVCATALOG.

Small helpers and constants for reading configuration from the environment
and for building Alembic configuration programmatically.
"""

import os
import sys
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

DB_URL_ENV = "SVCATALOG_DB_URL"  # pragma: no mutate
ADDR_ENV = "SVCATALOG_ADDR"  # pragma: no mutate

MEMORY_DB_URL = "sqlite+pysqlite:///:memory:"
DEFAULT_ADDR = "127.0.0.1:8080"

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate


class DatabaseUrlNotSetError(Exception):
    """Raised when the SVCATALOG_DB_URL environment variable is not set."""


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `SVCATALOG_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `SVCATALOG_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def split_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``:port``) into a host and an integer port.

    An empty host binds every interface, as ``:8080`` does for Go-style
    listeners.

    Raises:
        ValueError: If the port is missing or not an integer.
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid address {addr!r}; expected HOST:PORT")
    return (host or "0.0.0.0"), int(port)


def base_url(addr: str) -> str:
    """Turn a ``host:port`` address into an HTTP base URL for clients."""
    if addr.startswith(("http://", "https://")):
        return addr.rstrip("/")
    host, port = split_addr(addr)
    if host == "0.0.0.0":  # pylint: disable=magic-value-comparison
        host = "127.0.0.1"
    return f"http://{host}:{port}"


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for SVCATALOG's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → the packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL. Can be `None` where Alembic won't need
            to connect, or where a connection is handed over through
            ``Config.attributes["connection"]``.
        stdout: Text stream Alembic will write status lines to.

    Returns:
        An `alembic.config.Config` pointing to the migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("svcatalog.adapters.db.alembic")),
    )
    return cfg
