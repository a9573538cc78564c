"""Service layer handlers."""

import logging
from dataclasses import replace

from svcatalog.domain.model import Catalog, Filter, Page, Service, Version
from svcatalog.interfaces import IdGenerator, ServiceStorage

logger = logging.getLogger(__name__)


def register_service(
    service: Service, storage: ServiceStorage, ids: IdGenerator
) -> Service:
    """Create a service (version <= 0) or append its next version.

    A new service is saved at version 0 under a freshly generated id; any id
    it carries is discarded.
    """
    if service.version <= 0:
        service = replace(service, id=ids.new_id(), version=0)
        logger.debug("Creating service %s (%s)", service.id, service.name)
    else:
        logger.debug("Updating service %s to version %d", service.id, service.version)
    return storage.save_service(service)


def add_version(version: Version, storage: ServiceStorage) -> Version:
    """Attach a named version to an existing service."""
    logger.debug("Adding version %s to service %s", version.name, version.service_id)
    return storage.save_version(version)


def list_catalog(filter_: Filter, page: Page, storage: ServiceStorage) -> Catalog:
    return storage.list_services(filter_, page)
