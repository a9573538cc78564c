"""SVCATALOG CLI entry point.

Defines the top-level ``catalog`` command (via Click-Extra), configures logging
once for every subcommand, and registers:

- ``catalog start`` / ``list`` / ``load``: serve the catalog, or drive a
  running server as a client.
- ``catalog db``: forward-only database management (upgrade/current/status).

The CLI version is sourced from `svcatalog.__version__` and displayed by
Click-Extra (``--version``).

Examples
    $ catalog start --addr :8080
    $ catalog load --count 8
    $ catalog list --name service-1 --json
    $ catalog db upgrade
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from svcatalog import __version__
from svcatalog.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .services import list_services, load, start

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """SVCATALOG command-line interface.

    A catalog of services and their versions. Services are versioned
    append-only: every update adds a row, and concurrent writers are
    arbitrated by the database, never by locks in the server.
    """


def default_log_path() -> Path:
    return Path(user_log_dir("svcatalog", appauthor=False)) / "latest.log"


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=default_log_path,
    envvar="SVCATALOG_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="SVCATALOG_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "(tunable via SVCATALOG_FLIGHT_RECORDER_CAPACITY) at DEBUG granularity "
        "(unaffected by -v/-q) and writes them to --log-path when a WARNING/ERROR "
        "occurs, or on clean exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR."
    ),
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to BOTH "
        "console and flight-recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L uvicorn.access=INFO)."
    ),
    default=(),
    show_envvar=True,
)
@clickx.pass_context
def catalog(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """SVCATALOG command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = []

    # 1) console
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(
        config_console_handler(level=level, debug_mode=debug, color=use_color)
    )

    # 2) flight recorder
    if flight_recorder:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 3) root logger captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 4) third-party logger levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=logging.DEBUG if debug else level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


catalog.add_command(start)
catalog.add_command(list_services)
catalog.add_command(load)
catalog.add_command(db_group)
