"""Helpers for parsing logger-level CLI options.

Used by ``catalog -L NAME=LEVEL`` (repeatable, or comma/space-separated in
one value). Items are normalized into a flat list, then each textual level
is validated and converted to its numeric logging level.
"""

import logging
import re

import click

# Chatty libraries start at WARNING unless overridden with -L
DEFAULT_LIB_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "alembic": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split a string, or each string of a sequence, on commas and whitespace.

    Empty fragments are dropped.
    """
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in re.split(r"[,\s]+", v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Starts from ``DEFAULT_LIB_LEVELS`` and applies the CLI overrides on top.
    LEVEL is a standard logging level name, case-insensitive.

    Returns:
        dict[str, int]: Logger names mapped to numeric levels.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        lvl = logging.getLevelName(level_str.strip().upper())
        if not isinstance(lvl, int):
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
