"""Client-side port for talking to a catalog server."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svcatalog.domain.model import Catalog, Filter, Page, Service, Version


class Transport(abc.ABC):
    """Remote access to the catalog.

    Unlike ``ServiceStorage``, a transport may reshape its inputs: the server
    assigns the id of a service being created.
    """

    @abc.abstractmethod
    def save_service(self, service: Service) -> Service:
        """Add or update a service and return it as the server stored it."""

    @abc.abstractmethod
    def save_version(self, version: Version) -> Version:
        """Add a version to an existing service."""

    @abc.abstractmethod
    def list_services(self, filter_: Filter, page: Page) -> Catalog:
        """List services. An empty filter lists everything."""
