"""Domain values and errors for the service catalog."""

from .errors import CatalogError, ConflictError, InvalidStateError, NoSuchServiceError
from .model import (
    DEFAULT_LIMIT,
    EMPTY_FILTER,
    MAX_LIMIT,
    ORDER_FIELDS,
    Catalog,
    Filter,
    Page,
    Service,
    Version,
    new_service,
    new_version,
    utc_now,
)

__all__ = [
    "Catalog",
    "CatalogError",
    "ConflictError",
    "DEFAULT_LIMIT",
    "EMPTY_FILTER",
    "Filter",
    "InvalidStateError",
    "MAX_LIMIT",
    "NoSuchServiceError",
    "ORDER_FIELDS",
    "Page",
    "Service",
    "Version",
    "new_service",
    "new_version",
    "utc_now",
]
