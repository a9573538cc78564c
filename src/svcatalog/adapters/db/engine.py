"""Database engine factory and helpers.

Centralizes creation of SQLAlchemy Engines and applies backend-specific tuning:

- **SQLite**: connection PRAGMAs enforce foreign keys, enable WAL, and tune
  durability/temporary storage. A busy timeout makes concurrent writers wait
  for each other instead of failing with "database is locked". In-memory
  databases live on a single connection (``StaticPool``), so they suit
  single-threaded use only. ``bootstrap()`` never serves one.
- **Other backends**: no tuning applied here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
SQLITE_BUSY_TIMEOUT_S = 30
MEMORY_DATABASES = {None, "", ":memory:"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite."""
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def is_sqlite_memory(url: str | URL) -> bool:
    """Return True if the URL points at a private in-memory SQLite database."""
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES and u.database in MEMORY_DATABASES


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    For SQLite the following PRAGMAs are applied on every new connection:
        - ``foreign_keys=ON`` (enforce referential integrity)
        - ``journal_mode=WAL`` (write-ahead logging for concurrency)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``temp_store=MEMORY`` (reduce temp file I/O)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """
    kwargs: dict[str, Any] = {}
    if is_sqlite(url):
        kwargs["connect_args"] = {
            "timeout": SQLITE_BUSY_TIMEOUT_S,
            "check_same_thread": False,
        }
        if is_sqlite_memory(url):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, echo=echo, **kwargs)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

    return engine
