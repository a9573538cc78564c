"""Default marks for tests under `tests/e2e/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import mark_items_under

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `e2e` marks to items in `tests/e2e/`."""
    mark_items_under(Path(__file__).parent.resolve(), "e2e", items)
