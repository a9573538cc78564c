"""Logging helpers used by the catalog CLI and server.

Console output goes through Rich. An optional in-memory "flight recorder"
buffers DEBUG records and writes them to disk when something goes wrong.
Records from third-party loggers (uvicorn, sqlalchemy, httpx, ...) carry a
short bracketed prefix on the console so they stand apart from our own.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import fastapi
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "svcatalog"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[lib]`` for third-party records, else ``""``.

    Always lets the record through.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            # "uvicorn.error" -> "[uvicorn]"
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler writing to stderr.

    In debug mode the handler logs everything, with timestamps, logger names,
    and source paths. Otherwise third-party records get a short prefix.

    Args:
        level: Minimum level for console output (DEBUG in debug mode).
        debug_mode: Enable developer diagnostics.
        color: Enable color output; mirrors click-extra's ``--color/--no-color``.

    Returns:
        RichHandler: Handler ready to attach to the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    if debug_mode:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Configure an in-memory flight recorder backed by ``path``.

    Up to ``capacity`` records are buffered and written out when a record at
    ``flush_level`` or above arrives, or on close when ``flush_on_close``.
    The file is opened lazily, so nothing is created until the first flush.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] "
            "%(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line startup summary at INFO and diagnostics at DEBUG.

    The diagnostics cover interpreter, platform, process, and the versions of
    the libraries the catalog is built on, plus the active handler setup.
    """
    logger.info(
        "SVCATALOG %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("Alembic: %s", alembic.__version__)
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("FastAPI: %s", fastapi.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            str(log_path) if log_path else "<none>",
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )
