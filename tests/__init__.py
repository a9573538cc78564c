"""SVCATALOG test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : The storage contract, run against every ServiceStorage adapter.
- integration/  : Real interactions with a database (migrations, bootstrap).
- e2e/          : The HTTP API and the ``catalog`` CLI, driven from the outside.
- fixtures/     : Shared pytest fixtures (engines, stores, data factories).
- helpers/      : Shared utilities (no tests here).

Property-based tests live with the layer they exercise and use
@pytest.mark.property. Tests that need Docker or race threads use
@pytest.mark.slow.
"""
