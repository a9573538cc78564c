"""Fixtures for exercising the HTTP API in-process."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from svcatalog.adapters.http import create_app
from svcatalog.adapters.id_generators import SimpleIdGenerator
from svcatalog.adapters.storage.memory import InMemoryServiceStore
from svcatalog.bootstrap import AppContainer, bootstrap

# pylint: disable=redefined-outer-name


@pytest.fixture
def client(clock) -> Iterator[TestClient]:
    """A TestClient over an in-memory store with sequential ids."""
    app = create_app(InMemoryServiceStore(clock=clock), SimpleIdGenerator())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sqlite_container() -> Iterator[AppContainer]:
    """A fully bootstrapped application over a scratch SQLite database."""
    container = bootstrap()
    try:
        yield container
    finally:
        container.close()
