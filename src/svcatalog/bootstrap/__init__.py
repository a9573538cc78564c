"""Bootstrap (composition root) for SVCATALOG.

Assembles the application at runtime: builds engines, initializes the schema,
wires storage into the service layer and the HTTP app, and builds client
transports for the CLI.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain
  directly, except for domain values).
- Inner layers must not import `svcatalog.bootstrap`.
"""

from .bootstrap import (
    AppContainer,
    SchemaNotReadyError,
    bootstrap,
    build_app,
    build_store,
    build_transport,
    init_schema,
    scratch_db_url,
)

__all__ = [
    "AppContainer",
    "SchemaNotReadyError",
    "bootstrap",
    "build_app",
    "build_store",
    "build_transport",
    "init_schema",
    "scratch_db_url",
]
