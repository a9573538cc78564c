"""Storage port for the service catalog.

Contract overview
-----------------
Save service:
- ``version == 0`` creates the service. Two creations racing on the same id
  resolve to exactly one winner; the other raises ``ConflictError``.
- ``version > 0`` appends the next row of an existing service. The row at
  ``version - 1`` must exist (``NoSuchServiceError`` otherwise) and the slot at
  ``version`` must be free (``ConflictError`` otherwise). The check and the
  insert form one atomic unit.
- Rows are never updated in place.

Save version:
- The service must exist and the check must target its current row
  (``NoSuchServiceError`` otherwise).
- ``(service_id, name)`` is unique (``ConflictError``).

List services:
- Only current service rows are listed, filtered conjunctively, ordered by
  ``page.order_by`` then id, and paginated *before* versions are attached.
- Invalid page options raise ``InvalidStateError``.

Implementations translate their own failure signals into
``svcatalog.domain.errors`` and let every other failure propagate.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svcatalog.domain.model import Catalog, Filter, Page, Service, Version


class ServiceStorage(abc.ABC):
    """Persistence for services and their versions."""

    @abc.abstractmethod
    def save_service(self, service: Service) -> Service:
        """Create a service or append its next version.

        Args:
            service: The service to persist. Its ``updated`` field is ignored.
                A version <= 0 creates the service at version 0.

        Returns:
            The persisted service, stamped with the store's ``updated`` time.

        Raises:
            InvalidStateError: If ``id`` or ``name`` is empty.
            ConflictError: If ``(id, version)`` already exists.
            NoSuchServiceError: If updating and ``(id, version - 1)`` is absent.
        """

    @abc.abstractmethod
    def save_version(self, version: Version) -> Version:
        """Attach a new version to the current row of a service.

        Args:
            version: The version to persist. Its ``created`` field is ignored.

        Returns:
            The persisted version, stamped with the store's ``created`` time.

        Raises:
            InvalidStateError: If ``service_id`` or ``name`` is empty.
            ConflictError: If the service already has a version of that name.
            NoSuchServiceError: If the service does not exist.
        """

    @abc.abstractmethod
    def list_services(self, filter_: Filter, page: Page) -> Catalog:
        """List a page of current services with their versions.

        Args:
            filter_: Conjunctive predicates on name, description, and id.
            page: Offset, limit, and order-by field.

        Returns:
            The matching page as a ``Catalog``. An empty catalog is not an error.

        Raises:
            InvalidStateError: If the page options are invalid.
        """
