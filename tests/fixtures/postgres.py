"""PostgreSQL related fixtures for SVCATALOG.

PostgreSQL engines are backed by a temporary Postgres 17 instance launched with
Testcontainers and migrated to Alembic head. Tests that need one are skipped
when no Docker daemon is reachable.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

import docker
import pytest
from alembic import command
from sqlalchemy import text
from testcontainers.postgres import PostgresContainer

from svcatalog import config
from svcatalog.adapters.db.engine import make_engine

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=redefined-outer-name

POSTGRES_FIXTURES = {"postgres_engine", "pg_url", "pg_url_base"}


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except Exception:  # pylint: disable=broad-except
        return False
    return True


DOCKER_UP = _docker_available()


def pytest_collection_modifyitems(items):
    """Skip Postgres/Testcontainers tests if Docker is unavailable."""
    if DOCKER_UP:
        return
    skip = pytest.mark.skip(reason="Docker/Testcontainers backend not available")
    for item in items:
        if POSTGRES_FIXTURES & set(getattr(item, "fixturenames", ())):
            item.add_marker(skip)
        elif "postgres" in item.nodeid:
            item.add_marker(skip)


def _container() -> PostgresContainer:
    return PostgresContainer(
        image="postgres:17",
        username="catalog",
        password="abc123",
        dbname="catalog",
    )


def _psycopg3(url: str) -> str:
    # testcontainers returns psycopg2 URLs by default
    return re.sub(r"\+psycopg2\b", "+psycopg", url)


@pytest.fixture
def pg_url_base() -> Iterator[str]:
    """Per-test Postgres 17 container URL, unmigrated."""
    with _container() as pg:
        yield _psycopg3(pg.get_connection_url())


@pytest.fixture(scope="session")
def pg_url() -> Iterator[str]:
    """Session Postgres 17 container URL, migrated to Alembic head once."""
    with _container() as pg:
        url = _psycopg3(pg.get_connection_url())
        command.upgrade(config.build_alembic_config(url), "head")
        yield url


@pytest.fixture
def postgres_engine(pg_url: str) -> Iterator[Engine]:
    """Per-test Postgres engine bound to the session container.

    Truncates both catalog tables after the test.
    """
    eng = make_engine(pg_url)
    try:
        yield eng
    finally:
        with eng.begin() as conn:
            conn.execute(text("TRUNCATE TABLE service, version RESTART IDENTITY"))
        eng.dispose()
