"""Domain values for the service catalog.

All values are immutable. "Changing" a service produces a new value, and
persisting that value appends a new row; nothing is ever updated in place.

Conventions:
  - Service ids are opaque strings, assigned once on creation.
  - ``Service.version`` starts at 0 and grows by exactly 1 per update.
  - Timestamps are tz-aware UTC. The store stamps ``Service.updated`` and
    ``Version.created`` on every successful write.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from .errors import InvalidStateError

ORDER_FIELDS = ("name", "desc", "updated")
DEFAULT_LIMIT = 1024
MAX_LIMIT = 1024


def utc_now() -> datetime:
    """Return the current time as a tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Service:
    """A service record at a specific version.

    Multiple services may share a name; ``id`` is the only identity. The pair
    ``(id, version)`` is unique, and the row with the highest version for an
    id is the current service.
    """

    id: str
    name: str
    desc: str = ""
    version: int = 0
    updated: datetime | None = None

    def increment(self) -> Service:
        """Return the next version of this service, ready to be saved."""
        return replace(self, version=self.version + 1)

    def with_id(self, service_id: str) -> Service:
        return replace(self, id=service_id)

    def with_name(self, name: str) -> Service:
        return replace(self, name=name)

    def with_desc(self, desc: str) -> Service:
        return replace(self, desc=desc)

    def stamped(self, when: datetime) -> Service:
        return replace(self, updated=when)

    def normalized(self) -> Service:
        """Map any negative version to 0, which means creation."""
        return replace(self, version=0) if self.version < 0 else self


@dataclass(frozen=True, slots=True)
class Version:
    """A named, immutable version of a service.

    Version names carry no ordering semantics (they need not be semantic
    versions), so ``created`` is the only sort key.
    """

    service_id: str
    name: str
    created: datetime | None = None

    def stamped(self, when: datetime) -> Version:
        return replace(self, created=when)


@dataclass(frozen=True, slots=True)
class Filter:
    """Conjunctive search predicates. ``None`` matches everything."""

    name_contains: str | None = None
    desc_contains: str | None = None
    service_id: str | None = None


EMPTY_FILTER = Filter()


@dataclass(frozen=True, slots=True)
class Page:
    """A window over the ordered list of current services."""

    offset: int = 0
    limit: int = DEFAULT_LIMIT
    order_by: str = "name"

    def validate(self) -> None:
        """Check the page options before they are used to build a query.

        ``order_by`` is checked against a closed set because it selects a
        column rather than a bound value.

        Raises:
            InvalidStateError: If any option is out of range.
        """
        if self.order_by not in ORDER_FIELDS:
            raise InvalidStateError(
                f"Invalid order by field [{self.order_by}]. "
                f"Must be one of [{', '.join(ORDER_FIELDS)}]"
            )
        if self.offset < 0:
            raise InvalidStateError(f"Invalid offset [{self.offset}]. Must be >= 0")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise InvalidStateError(
                f"Invalid limit [{self.limit}]. Must be between 1 and {MAX_LIMIT}"
            )


@dataclass(frozen=True, slots=True)
class Catalog:
    """A page of current services and their versions.

    ``services`` preserves the query order (``order_by`` then id). Every listed
    service has an entry in ``versions``, empty when it has none.
    """

    services: dict[str, Service] = field(default_factory=dict)
    versions: dict[str, list[Version]] = field(default_factory=dict)
    offset: int = 0
    limit: int = DEFAULT_LIMIT

    def __len__(self) -> int:
        return len(self.services)

    def versions_of(self, service_id: str) -> list[Version]:
        return self.versions.get(service_id, [])


def new_service(name: str, desc: str = "", *, service_id: str = "") -> Service:
    """Build a service at version 0. The id is normally assigned on save."""
    return Service(id=service_id, name=name, desc=desc, version=0)


def new_version(service_id: str, name: str) -> Version:
    return Version(service_id=service_id, name=name)


def require_text(value: str | None, field_name: str) -> str:
    """Return ``value`` if it holds non-whitespace text.

    Raises:
        InvalidStateError: If ``value`` is empty or whitespace.
    """
    if value is None or not value.strip():
        raise InvalidStateError(f"{field_name} must not be empty")
    return value
