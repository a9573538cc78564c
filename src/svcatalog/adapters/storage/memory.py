"""In-memory ServiceStorage implementation for tests and demos.

Mirrors the relational adapter's contract, including case-insensitive
substring filters. A single lock stands in for the database's statement
atomicity; rows are kept append-only, as in the SQL tables.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

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

# pylint: disable=consider-using-assignment-expr


@dataclass
class InMemoryCatalogData:
    """Backing rows, keyed the way the SQL unique constraints are."""

    services: dict[str, list[Service]] = field(default_factory=dict)
    versions: dict[str, list[Version]] = field(default_factory=dict)


class InMemoryServiceStore(ServiceStorage):
    """In-memory implementation of the ServiceStorage interface."""

    def __init__(
        self,
        data: InMemoryCatalogData | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._data = data if data is not None else InMemoryCatalogData()
        self._clock = clock
        self._lock = threading.Lock()

    def save_service(self, service: Service) -> Service:
        require_text(service.id, "id")
        require_text(service.name, "name")
        stamped = service.normalized().stamped(self._clock())
        with self._lock:
            rows = self._data.services.get(stamped.id, [])
            if any(row.version == stamped.version for row in rows):
                raise ConflictError.for_key(
                    "service", f"{stamped.id}@{stamped.version}"
                )
            if stamped.version > 0 and not any(
                row.version == stamped.version - 1 for row in rows
            ):
                raise NoSuchServiceError(
                    stamped.id,
                    f"No such service [{stamped.id}] at version {stamped.version - 1}",
                )
            self._data.services.setdefault(stamped.id, []).append(stamped)
        return stamped

    def save_version(self, version: Version) -> Version:
        require_text(version.service_id, "service_id")
        require_text(version.name, "name")

        stamped = version.stamped(self._clock())
        with self._lock:
            if not self._data.services.get(stamped.service_id):
                raise NoSuchServiceError(stamped.service_id)
            existing = self._data.versions.setdefault(stamped.service_id, [])
            if any(v.name == stamped.name for v in existing):
                raise ConflictError.for_key(
                    "version", f"{stamped.service_id}/{stamped.name}"
                )
            existing.append(stamped)
        return stamped

    def list_services(self, filter_: Filter, page: Page) -> Catalog:
        page.validate()

        with self._lock:
            current = [
                max(rows, key=lambda row: row.version)
                for rows in self._data.services.values()
                if rows
            ]
            matching = sorted(
                (svc for svc in current if _matches(svc, filter_)),
                key=lambda svc: (getattr(svc, page.order_by), svc.id),
            )
            window = matching[page.offset : page.offset + page.limit]
            versions = {
                svc.id: sorted(
                    self._data.versions.get(svc.id, []),
                    key=lambda v: (v.created, v.name),
                )
                for svc in window
            }

        return Catalog(
            services={svc.id: svc for svc in window},
            versions=versions,
            offset=page.offset,
            limit=page.limit,
        )


def _contains(text: str, needle: str | None) -> bool:
    return needle is None or needle.lower() in text.lower()


def _matches(service: Service, filter_: Filter) -> bool:
    if not _contains(service.name, filter_.name_contains):
        return False
    if not _contains(service.desc, filter_.desc_contains):
        return False
    if filter_.service_id is not None and filter_.service_id != service.id:
        return False
    return True
