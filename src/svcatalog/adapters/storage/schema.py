"""Catalog schema.

Two append-only tables mirror the domain values. Listing the catalog joins
versions onto the current service rows.

Constraints (enforced here):

| Constraint                    | Purpose                                       |
|-------------------------------|-----------------------------------------------|
| UNIQUE(id, version)           | per-service optimistic concurrency            |
| CHECK(version >= 0)           | versioning starts at 0                        |
| INDEX(name), INDEX(desc)      | substring search on name and description      |
| UNIQUE(service_id, name)      | version names are unique within a service     |

There is deliberately no foreign key from ``version.service_id``: a service is
identified by ``id`` alone, which is not unique across service rows. The
existence check happens in the insert statement itself.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Identity,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from svcatalog.adapters.db.metadata import metadata
from svcatalog.adapters.db.sa_types import UTCDateTime

__all__ = ["service", "version", "ID_LENGTH", "NAME_LENGTH"]

ID_LENGTH = 64
NAME_LENGTH = 255

service = Table(
    "service",
    metadata,
    Column("seq", Integer, Identity(start=1), primary_key=True),
    Column(
        "id",
        String(ID_LENGTH),
        nullable=False,
        comment="Opaque service identifier, assigned once on creation.",
    ),
    Column(
        "version",
        Integer,
        nullable=False,
        comment="Per-service version (starts at 0); used for optimistic concurrency.",
    ),
    Column("name", String(NAME_LENGTH), nullable=False),
    Column("desc", Text, nullable=False, default=""),
    Column(
        "updated",
        UTCDateTime(),
        nullable=False,
        comment="Store-assigned UTC timestamp of this row.",
    ),
    UniqueConstraint("id", "version"),
    CheckConstraint("version >= 0", name="non_negative_version"),
    Index(None, "name"),
    Index(None, "desc"),
    comment="Append-only service rows. The highest version per id is current.",
)

version = Table(
    "version",
    metadata,
    Column("seq", Integer, Identity(start=1), primary_key=True),
    Column("service_id", String(ID_LENGTH), nullable=False),
    Column("name", String(NAME_LENGTH), nullable=False),
    Column(
        "created",
        UTCDateTime(),
        nullable=False,
        comment="Store-assigned UTC creation timestamp.",
    ),
    UniqueConstraint("service_id", "name"),
    comment="Immutable service versions.",
)
