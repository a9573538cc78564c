"""SQLAlchemy-backed ServiceStorage adapter.

Writes are append-only. Every conditional write is a single
``INSERT ... SELECT ... WHERE EXISTS (...)`` statement, so the check and the
insert cannot be interleaved by another writer; the unique constraints on
``(id, version)`` and ``(service_id, name)`` are the only serialization point.
No application-level locking is used.

Signals are translated as follows:

| Engine signal                       | Raised                 |
|-------------------------------------|------------------------|
| unique violation (IntegrityError)   | ``ConflictError``      |
| conditional insert affected 0 rows  | ``NoSuchServiceError`` |
| anything else                       | propagated unmodified  |
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, Table, insert, literal, select
from sqlalchemy.exc import IntegrityError

from svcatalog.adapters.db.dialects import DialectName
from svcatalog.adapters.db.errors import is_unique_violation
from svcatalog.domain.errors import ConflictError, NoSuchServiceError
from svcatalog.domain.model import (
    Catalog,
    Filter,
    Page,
    Service,
    Version,
    require_text,
    utc_now,
)
from svcatalog.interfaces.storage import ServiceStorage

from .schema import service as service_table
from .schema import version as version_table

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.engine import Engine, Row
    from sqlalchemy.sql import FromClause
    from sqlalchemy.sql.dml import Insert

logger = logging.getLogger(__name__)


class SqlAlchemyServiceStore(ServiceStorage):
    """ServiceStorage backed by a relational database (SQLite or PostgreSQL).

    Each call runs in its own transaction on a fresh connection from
    ``engine``. The schema must already exist (see ``bootstrap.init_schema``).
    """

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utc_now):
        self.engine = engine
        self.dialect = DialectName.from_sqlalchemy(engine)
        self._clock = clock

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def save_service(self, service: Service) -> Service:
        require_text(service.id, "id")
        require_text(service.name, "name")
        stamped = service.normalized().stamped(self._clock())
        row = {
            "id": stamped.id,
            "version": stamped.version,
            "name": stamped.name,
            "desc": stamped.desc,
            "updated": stamped.updated,
        }
        conflict = ConflictError.for_key("service", f"{stamped.id}@{stamped.version}")

        # A first version is inserted unconditionally; if two creations race,
        # the unique constraint lets exactly one of them win.
        if stamped.version == 0:
            logger.debug("Adding service [id=%s, name=%s]", stamped.id, stamped.name)
            self._insert(insert(service_table).values(**row), conflict)
            return stamped

        logger.debug(
            "Updating service [id=%s, version=%s]", stamped.id, stamped.version
        )
        prior = service_table.alias("prior")
        prior_exists = (
            select(prior.c.id)
            .where(prior.c.id == stamped.id, prior.c.version == stamped.version - 1)
            .exists()
        )
        inserted = self._insert(
            _insert_where(service_table, row, prior_exists), conflict
        )
        if not inserted:
            raise NoSuchServiceError(
                stamped.id,
                f"No such service [{stamped.id}] at version {stamped.version - 1}",
            )
        return stamped

    def save_version(self, version: Version) -> Version:
        require_text(version.service_id, "service_id")
        require_text(version.name, "name")

        stamped = version.stamped(self._clock())
        row = {
            "service_id": stamped.service_id,
            "name": stamped.name,
            "created": stamped.created,
        }
        conflict = ConflictError.for_key(
            "version", f"{stamped.service_id}/{stamped.name}"
        )

        logger.debug(
            "Adding version [service=%s, name=%s]", stamped.service_id, stamped.name
        )
        s = service_table.alias("s")
        current_exists = (
            select(s.c.id)
            .where(s.c.id == stamped.service_id, ~_has_newer_row(s))
            .exists()
        )
        inserted = self._insert(
            _insert_where(version_table, row, current_exists), conflict
        )
        if not inserted:
            raise NoSuchServiceError(stamped.service_id)
        return stamped

    def list_services(self, filter_: Filter, page: Page) -> Catalog:
        page.validate()

        query = _catalog_query(filter_, page)
        with self.engine.connect() as conn:
            rows = conn.execute(query).all()

        return _collapse(rows, page)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _insert(self, stmt: Insert, conflict: ConflictError) -> int:
        """Execute an insert in its own transaction and return the row count.

        Raises:
            ConflictError: ``conflict``, if the insert hit a unique constraint.
        """
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except IntegrityError as e:
            if is_unique_violation(e, self.dialect):
                raise conflict from e
            raise


def _has_newer_row(s: FromClause) -> ColumnElement[bool]:
    """EXISTS predicate: another row of the same service has a higher version.

    Negated, this selects current rows. An anti-join keeps the predicate
    composable with filters applied before LIMIT/OFFSET, which a MAX()
    aggregate would not.
    """
    o = service_table.alias("o")
    return (
        select(o.c.id)
        .where(o.c.id == s.c.id, o.c.version > s.c.version)
        .exists()
    )


def _insert_where(
    table: Table, row: Mapping[str, Any], condition: ColumnElement[bool]
) -> Insert:
    """Build ``INSERT INTO table (...) SELECT <row> WHERE <condition>``."""
    columns = list(row)
    source = select(
        *(literal(row[name], table.c[name].type).label(name) for name in columns)
    ).where(condition)
    return insert(table).from_select(columns, source)


def _catalog_query(filter_: Filter, page: Page) -> Select:
    """Build the paginated catalog query.

    Services are filtered, ordered, and windowed *before* versions are joined,
    so a service with many versions still takes a single page slot. Substring
    filters compare ``lower()`` of both sides, like the in-memory store.
    """
    s = service_table.alias("s")
    services = select(s).where(~_has_newer_row(s))
    if filter_.name_contains is not None:
        services = services.where(
            s.c["name"].icontains(filter_.name_contains, autoescape=True)
        )
    if filter_.desc_contains is not None:
        services = services.where(
            s.c["desc"].icontains(filter_.desc_contains, autoescape=True)
        )
    if filter_.service_id is not None:
        services = services.where(s.c["id"] == filter_.service_id)

    # order_by was checked against the closed set by Page.validate()
    window = (
        services.order_by(s.c[page.order_by], s.c["id"])
        .limit(page.limit)
        .offset(page.offset)
        .subquery("p")
    )

    v = version_table
    return (
        select(
            window.c["id"],
            window.c["name"],
            window.c["desc"],
            window.c["version"],
            window.c["updated"],
            v.c["service_id"].label("version_service_id"),
            v.c["name"].label("version_name"),
            v.c["created"].label("version_created"),
        )
        .select_from(window.outerjoin(v, v.c["service_id"] == window.c["id"]))
        .order_by(
            window.c[page.order_by],
            window.c["id"],
            v.c["created"],
            v.c["name"],
        )
    )


def _collapse(rows: list[Row], page: Page) -> Catalog:
    """Fold flat joined rows into a two-level Catalog."""
    services: dict[str, Service] = {}
    versions: dict[str, list[Version]] = {}
    for row in rows:
        m = row._mapping  # pylint: disable=protected-access
        if m["id"] not in services:
            services[m["id"]] = Service(
                id=m["id"],
                name=m["name"],
                desc=m["desc"],
                version=m["version"],
                updated=m["updated"],
            )
            versions[m["id"]] = []
        if m["version_service_id"] is not None:
            versions[m["version_service_id"]].append(
                Version(
                    service_id=m["version_service_id"],
                    name=m["version_name"],
                    created=m["version_created"],
                )
            )

    return Catalog(
        services=services, versions=versions, offset=page.offset, limit=page.limit
    )
