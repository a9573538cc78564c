"""Catalog server and client commands.

- ``catalog start``: serve the HTTP API over a migrated database.
- ``catalog list``: render a page of the catalog from a running server.
- ``catalog load``: seed a running server with sample services and versions.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import TYPE_CHECKING

import click
import httpx
import uvicorn
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import ArgumentError, OperationalError

from svcatalog import config
from svcatalog.adapters.http.schemas import CatalogModel
from svcatalog.bootstrap import bootstrap, build_transport
from svcatalog.domain.errors import CatalogError
from svcatalog.domain.model import (
    ORDER_FIELDS,
    Catalog,
    Filter,
    Page,
    new_service,
    new_version,
    utc_now,
)

from .helpers import sanitize_url, success

if TYPE_CHECKING:
    from collections.abc import Iterator

    from svcatalog.interfaces import Transport

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 16

addr_option = click.option(
    "--addr",
    default=config.DEFAULT_ADDR,
    envvar=config.ADDR_ENV,
    show_default=True,
    show_envvar=True,
    help="Address of the catalog server (HOST:PORT).",
)


@contextmanager
def _client(addr: str) -> Iterator[Transport]:
    """Open a transport to ``addr`` and turn its failures into ClickExceptions."""
    try:
        transport = build_transport(addr)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--addr") from e

    try:
        with transport:
            yield transport
    except CatalogError as e:
        raise click.ClickException(str(e)) from e
    except httpx.HTTPError as e:
        raise click.ClickException(
            f"Cannot reach the catalog server at {addr}: {e}"
        ) from e


@click.command()
@addr_option
@click.option(
    "--db-url",
    default=None,
    envvar=config.DB_URL_ENV,
    show_envvar=True,
    help="SQLAlchemy database URL. Defaults to a throwaway SQLite database.",
)
def start(addr: str, db_url: str | None) -> None:
    """Start a catalog server.

    The database is migrated to the latest schema before serving.
    """
    try:
        host, port = config.split_addr(addr)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--addr") from e

    try:
        if db_url is None:
            logger.info("No database configured")
        else:
            logger.info("Using database [%s]", sanitize_url(db_url))
        container = bootstrap(db_url)
    except ArgumentError as e:
        raise click.ClickException(f"Invalid database URL: {e}") from e
    except OperationalError as e:
        raise click.ClickException(f"Cannot open the database: {e.orig}") from e

    logger.info("Serving the catalog on http://%s:%d", host, port)
    try:
        uvicorn.run(container.app, host=host, port=port, log_config=None)
    finally:
        container.close()


@click.command(name="list")
@addr_option
@click.option("--name", help="Return any services whose name contains NAME.")
@click.option("--desc", help="Return any services whose description contains DESC.")
@click.option("--id", "service_id", help="Return only the service with this id.")
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Starting offset of results.",
)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=DEFAULT_LIST_LIMIT,
    show_default=True,
    help="Maximum number of results.",
)
@click.option(
    "--order",
    type=click.Choice(ORDER_FIELDS),
    default="name",
    show_default=True,
    help="Field to order services by.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON.")
def list_services(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    addr: str,
    name: str | None,
    desc: str | None,
    service_id: str | None,
    offset: int,
    limit: int,
    order: str,
    as_json: bool,
) -> None:
    """List the services catalog."""
    filter_ = Filter(name_contains=name, desc_contains=desc, service_id=service_id)
    page = Page(offset=offset, limit=limit, order_by=order)
    with _client(addr) as transport:
        catalog = transport.list_services(filter_, page)

    if as_json:
        click.echo(CatalogModel.from_domain(catalog).model_dump_json(indent=2))
        return
    Console().print(render_catalog(catalog))


@click.command()
@addr_option
@click.option(
    "--count",
    type=click.IntRange(min=0),
    default=32,
    show_default=True,
    help="Number of services to create.",
)
@click.option(
    "--versions",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="Number of versions to add to each service.",
)
def load(addr: str, count: int, versions: int) -> None:
    """Load some services into the catalog."""
    with _client(addr) as transport:
        for i in range(count):
            svc = transport.save_service(
                new_service(f"service-{i}", f"description-{i}")
            )
            for j in range(versions):
                transport.save_version(new_version(svc.id, f"version-{j}"))
            click.echo(f"Created service [{svc.name}]")
    success(f"Loaded {count} services")


def render_catalog(catalog: Catalog, now: datetime | None = None) -> Table:
    """Render a catalog page as a Rich table, one row per service."""
    now = now or utc_now()
    table = Table(title=f"Services (Total={len(catalog)})", title_justify="left")
    table.add_column("name", no_wrap=True)
    table.add_column("desc")
    table.add_column("versions")
    table.add_column("id", overflow="fold", style="dim")

    for service_id, svc in catalog.services.items():
        versions = "\n".join(
            f"{v.name} ({since(v.created, now)})"
            for v in catalog.versions_of(service_id)
        )
        table.add_row(svc.name, svc.desc, versions or "-", service_id)
    return table


def since(when: datetime | None, now: datetime) -> str:
    """Format the time elapsed from ``when`` to ``now``, e.g. ``3m ago``."""
    if when is None:
        return "unknown"
    seconds = max(0, int((now - when).total_seconds()))
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit} ago"
    return f"{seconds}s ago"
