"""Fixtures for the ServiceStorage contract.

Every test taking ``store`` runs once per adapter. The SQL adapters run on
in-memory SQLite (schema from metadata), file SQLite (schema from Alembic),
and PostgreSQL (skipped without Docker). Racing writers also run on the
scratch database the server builds by default.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from svcatalog.adapters.storage import InMemoryServiceStore, SqlAlchemyServiceStore
from svcatalog.bootstrap import bootstrap
from svcatalog.interfaces import ServiceStorage

# pylint: disable=redefined-outer-name

ENGINE_FIXTURES = {
    "sqlite_memory": "sqlite_engine_memory",
    "sqlite_file": "sqlite_engine_file",
    "postgres": "postgres_engine",
}


@pytest.fixture(params=["memory", *ENGINE_FIXTURES])
def store(request: pytest.FixtureRequest, clock) -> ServiceStorage:
    """A ServiceStorage per adapter, stamping writes with the test clock."""
    if request.param == "memory":
        return InMemoryServiceStore(clock=clock)
    engine = request.getfixturevalue(ENGINE_FIXTURES[request.param])
    return SqlAlchemyServiceStore(engine, clock=clock)


@pytest.fixture(params=["memory", "sqlite_file", "server_default", "postgres"])
def concurrent_store(
    request: pytest.FixtureRequest, clock
) -> Iterator[ServiceStorage]:
    """A ServiceStorage whose writers may truly race on separate connections.

    ``server_default`` is the database ``bootstrap()`` builds when no URL is
    configured, the one ``catalog start`` serves by default.
    """
    if request.param == "memory":
        yield InMemoryServiceStore(clock=clock)
        return
    if request.param == "server_default":
        container = bootstrap()
        try:
            yield SqlAlchemyServiceStore(container.engine, clock=clock)
        finally:
            container.close()
        return
    engine = request.getfixturevalue(ENGINE_FIXTURES[request.param])
    yield SqlAlchemyServiceStore(engine, clock=clock)
