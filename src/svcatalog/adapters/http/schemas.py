"""Wire models for the catalog HTTP API.

Pydantic models mirror the domain values and convert to and from them. The
catalog's ordered service mapping travels as a list so that JSON clients keep
the query order.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from svcatalog.domain.model import Catalog, Service, Version


class ServiceModel(BaseModel):
    """A service as sent to and returned by ``PUT /services``.

    ``id`` is ignored when ``version`` is 0 or less: the server assigns ids.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = Field(min_length=1)
    desc: str = ""
    version: int = 0
    updated: datetime | None = None

    @classmethod
    def from_domain(cls, service: Service) -> ServiceModel:
        return cls(
            id=service.id,
            name=service.name,
            desc=service.desc,
            version=service.version,
            updated=service.updated,
        )

    def to_domain(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            desc=self.desc,
            version=self.version,
            updated=self.updated,
        )


class VersionModel(BaseModel):
    """A version as sent to and returned by ``PUT /versions``."""

    model_config = ConfigDict(extra="ignore")

    service_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    created: datetime | None = None

    @classmethod
    def from_domain(cls, version: Version) -> VersionModel:
        return cls(
            service_id=version.service_id, name=version.name, created=version.created
        )

    def to_domain(self) -> Version:
        return Version(service_id=self.service_id, name=self.name, created=self.created)


class CatalogModel(BaseModel):
    """A page of the catalog as returned by ``GET /services``."""

    services: list[ServiceModel] = Field(default_factory=list)
    versions: dict[str, list[VersionModel]] = Field(default_factory=dict)
    offset: int = 0
    limit: int = 0

    @classmethod
    def from_domain(cls, catalog: Catalog) -> CatalogModel:
        return cls(
            services=[ServiceModel.from_domain(s) for s in catalog.services.values()],
            versions={
                service_id: [VersionModel.from_domain(v) for v in versions]
                for service_id, versions in catalog.versions.items()
            },
            offset=catalog.offset,
            limit=catalog.limit,
        )

    def to_domain(self) -> Catalog:
        return Catalog(
            services={s.id: s.to_domain() for s in self.services},
            versions={
                service_id: [v.to_domain() for v in versions]
                for service_id, versions in self.versions.items()
            },
            offset=self.offset,
            limit=self.limit,
        )
