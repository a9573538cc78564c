"""Entrypoints (inbound adapters) for SVCATALOG.

Expose the catalog to the outside world: the ``catalog`` CLI, which serves the
HTTP API and drives it as a client. Parse and validate inputs, call the
bootstrap factories, and present results.

Dependency rule: may import `svcatalog.bootstrap`, `svcatalog.domain`, and
`svcatalog.config`; avoid importing `svcatalog.adapters` directly.
"""
