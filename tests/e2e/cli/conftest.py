"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only ``log-demo`` Click command that emits log messages at
every level, a CliRunner with an isolated filesystem, and a ``served``
fixture that points the client commands at an in-process catalog server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import click
import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from svcatalog.adapters.http import HttpTransport, create_app
from svcatalog.adapters.id_generators import SimpleIdGenerator
from svcatalog.adapters.storage.memory import InMemoryServiceStore
from svcatalog.entrypoints.cli import services as services_cli
from svcatalog.entrypoints.cli.main import catalog

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests."""
    logger = logging.getLogger("svcatalog.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    catalog.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(catalog, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Confine filesystem side-effects (log files, SQLite files) to the test."""
    with runner.isolated_filesystem():
        yield


@dataclass
class Served:
    """The store behind the in-process server, and the addresses dialed."""

    store: InMemoryServiceStore
    addrs: list[str] = field(default_factory=list)


@pytest.fixture
def served(monkeypatch) -> Served:
    """Route ``catalog list``/``load`` to an in-process server."""
    served = Served(InMemoryServiceStore())
    app = create_app(served.store, SimpleIdGenerator())

    def fake_build_transport(  # pylint: disable=unused-argument
        addr: str, timeout: float = 10.0
    ) -> HttpTransport:
        served.addrs.append(addr)
        return HttpTransport(TestClient(app))

    monkeypatch.setattr(services_cli, "build_transport", fake_build_transport)
    return served
