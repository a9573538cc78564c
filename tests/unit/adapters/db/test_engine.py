"""Unit tests for the database engine helpers.

These tests cover:
- Detection of SQLite and in-memory SQLite URLs.
- Application of SQLite PRAGMAs and the busy timeout on connect.
- In-memory databases being shared by every connection and thread.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from svcatalog.adapters.db.engine import is_sqlite, is_sqlite_memory, make_engine

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_is_sqlite_true_for_sqlite_url():
    """is_sqlite() is True for SQLite URLs."""
    assert is_sqlite("sqlite:///:memory:")
    assert is_sqlite(make_url("sqlite+pysqlite:///file.db"))


def test_is_sqlite_false_for_postgres_url():
    """is_sqlite() is False for non-SQLite URLs."""
    assert not is_sqlite("postgresql://u:p@localhost/db")
    assert not is_sqlite(make_url("postgresql+psycopg://u:p@localhost/db"))


@pytest.mark.parametrize(
    "url,expected",
    [
        ("sqlite://", True),
        ("sqlite:///:memory:", True),
        ("sqlite+pysqlite:///:memory:", True),
        ("sqlite+pysqlite:///catalog.db", False),
        ("postgresql+psycopg://u:p@localhost/db", False),
    ],
)
def test_is_sqlite_memory(url, expected):
    """Only private in-memory SQLite URLs count as in-memory."""
    assert is_sqlite_memory(url) is expected


def test_memory_engine_uses_static_pool():
    """In-memory engines keep a single shared connection."""
    engine = make_engine("sqlite+pysqlite:///:memory:")
    try:
        assert isinstance(engine.pool, StaticPool)
    finally:
        engine.dispose()


def test_memory_database_is_shared_across_threads():
    """A table created on one thread is visible from another."""
    engine = make_engine("sqlite+pysqlite:///:memory:")
    seen: list[int] = []
    try:
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE t (x INTEGER)"))
            conn.execute(text("INSERT INTO t VALUES (42)"))

        def read():
            with engine.connect() as conn:
                seen.append(conn.execute(text("SELECT x FROM t")).scalar_one())

        thread = threading.Thread(target=read)
        thread.start()
        thread.join(timeout=5)
    finally:
        engine.dispose()

    assert seen == [42]


def test_sqlite_pragmas_applied(sqlite_engine_file: Engine):
    """SQLite engines created by make_engine() apply the expected PRAGMAs."""
    with sqlite_engine_file.connect() as cxn:
        fk = cxn.exec_driver_sql("PRAGMA foreign_keys;").scalar()
        jm = cxn.exec_driver_sql("PRAGMA journal_mode;").scalar()
        sync = cxn.exec_driver_sql("PRAGMA synchronous;").scalar()
        tmp = cxn.exec_driver_sql("PRAGMA temp_store;").scalar()
        busy = cxn.exec_driver_sql("PRAGMA busy_timeout;").scalar()
    assert fk == 1
    assert jm is not None
    assert jm.lower() == "wal"
    assert sync == 1
    assert tmp == 2
    assert busy == 30_000
