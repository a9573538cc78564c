"""Wire the catalog store, the HTTP app, and the client transport."""

from __future__ import annotations

import logging
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import httpx
from alembic import command
from sqlalchemy import inspect
from sqlalchemy.engine import URL

from svcatalog import config
from svcatalog.adapters.db.engine import is_sqlite_memory, make_engine
from svcatalog.adapters.http.client import HttpTransport
from svcatalog.adapters.http.server import create_app
from svcatalog.adapters.id_generators import UUIDv1Generator
from svcatalog.adapters.storage import SqlAlchemyServiceStore

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.engine import Engine

    from svcatalog.interfaces import IdGenerator, ServiceStorage

logger = logging.getLogger(__name__)

REQUIRED_TABLES = frozenset({"service", "version"})
SCRATCH_DB_NAME = "catalog.db"


class SchemaNotReadyError(Exception):
    """Raised when the catalog tables are missing after migrating."""


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants.

    ``scratch`` is the temporary directory holding a throwaway database, when
    no database was configured. ``close()`` disposes the engine and removes it.
    """

    store: SqlAlchemyServiceStore
    app: FastAPI
    scratch: tempfile.TemporaryDirectory[str] | None = None

    @property
    def engine(self) -> Engine:
        return self.store.engine

    def close(self) -> None:
        self.engine.dispose()
        if self.scratch is not None:
            self.scratch.cleanup()


def init_schema(engine: Engine, stdout: TextIO = sys.stdout) -> None:
    """Migrate ``engine``'s database to the latest schema.

    The migration runs on a connection handed to Alembic, so in-memory SQLite
    databases are migrated in place.

    Raises:
        SchemaNotReadyError: If the catalog tables still do not exist.
    """
    cfg = config.build_alembic_config(stdout=stdout)
    with engine.begin() as conn:
        cfg.attributes["connection"] = conn
        command.upgrade(cfg, "head")

    missing = REQUIRED_TABLES - set(inspect(engine).get_table_names())
    if missing:
        raise SchemaNotReadyError(
            f"Missing catalog tables after migration: {', '.join(sorted(missing))}"
        )
    logger.debug("Schema ready on %s", engine.url.render_as_string(hide_password=True))


def build_store(url: str) -> SqlAlchemyServiceStore:
    """Build a store on a fresh engine, migrating its database first."""
    engine = make_engine(url)
    init_schema(engine)
    return SqlAlchemyServiceStore(engine)


def build_app(
    store: ServiceStorage, id_generator: IdGenerator | None = None
) -> FastAPI:
    """Build the HTTP application around ``store``."""
    return create_app(store, id_generator or UUIDv1Generator())


def build_transport(addr: str, timeout: float = 10.0) -> HttpTransport:
    """Build a client transport for the catalog server at ``addr``."""
    client = httpx.Client(base_url=config.base_url(addr), timeout=timeout)
    return HttpTransport(client)


def scratch_db_url(directory: str | Path) -> str:
    """URL of the throwaway SQLite database kept in ``directory``."""
    return str(
        URL.create("sqlite+pysqlite", database=str(Path(directory) / SCRATCH_DB_NAME))
    )


def bootstrap(db_url: str | None = None) -> AppContainer:
    """Build the server side of the catalog.

    Without a URL, or with a private in-memory SQLite URL, the catalog runs on
    a SQLite file in a fresh temporary directory so that every request thread
    gets its own connection. A private in-memory database lives on one shared
    connection, and concurrent transactions on it would interleave.

    Args:
        db_url: SQLAlchemy URL of the backing database.
    """
    scratch = None
    if not db_url or is_sqlite_memory(db_url):
        scratch = tempfile.TemporaryDirectory(prefix="svcatalog-")
        db_url = scratch_db_url(scratch.name)
        logger.info("Using scratch database [%s]", db_url)

    try:
        store = build_store(db_url)
    except Exception:
        if scratch is not None:
            scratch.cleanup()
        raise
    return AppContainer(store=store, app=build_app(store), scratch=scratch)
