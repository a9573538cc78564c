"""Service layer for SVCATALOG.

Implements the catalog use-cases on top of the storage port: creating and
updating services, adding versions, and listing the catalog.

Dependency rule: may import `svcatalog.domain` and `svcatalog.interfaces`, but
not `svcatalog.adapters` or `svcatalog.entrypoints`.
"""
