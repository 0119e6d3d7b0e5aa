"""Hearth CLI entry point.

Defines the top-level ``hearth`` command group and registers the commands
that inspect and maintain a project:

- ``hearth info`` - show the resolved settings.
- ``hearth check`` - verify that the project can be bootstrapped.
- ``hearth cache prune|clear`` - maintain the application caches.

The group itself only sets up console logging and the flight recorder; the
project root (``--root`` or ``HEARTH_ROOT``, defaulting to the current
directory) is handed to the commands through ``ctx.obj``. Any option can also
be set through a ``HEARTH_<OPTION>`` environment variable.

Examples
    $ hearth --version
    $ hearth --root /srv/site info
    $ hearth -v cache prune
"""

import logging
from pathlib import Path

import click
from platformdirs import user_log_dir

from hearth import __version__
from hearth.config import ROOT_ENV_VAR
from hearth.logging import (
    DEFAULT_RECORDER_CAPACITY,
    log_startup,
    setup_cli_logging,
    verbosity_level,
)

from .app import check, info
from .cache import cache as cache_group
from .helpers import hyperlink
from .helpers.log_level_parser import DEFAULT_LIB_LEVELS, parse_log_level

logger = logging.getLogger(__name__)

ENVVAR_PREFIX = "HEARTH"

HELP = """Hearth command-line interface.

    Hearth bootstraps small web applications from layered .env files: settings,
    templates, mailer, database session, logging, routing and caches. These
    commands inspect and maintain the project found at --root.
    """

EPILOG = "\b\n" + "\n".join(
    [
        click.style("See Also:", fg="blue", bold=True, underline=True),
        "  Env files: " + hyperlink("https://saurabh-kumar.com/python-dotenv/"),
        "  Templates: " + hyperlink("https://jinja.palletsprojects.com/"),
    ]
)


def default_recorder_path() -> Path:
    """Return the flight recorder file in the user's log directory."""
    return Path(user_log_dir("hearth", appauthor=False, ensure_exists=True)) / "latest.log"


@click.group(
    help=HELP,
    epilog=EPILOG,
    context_settings={"auto_envvar_prefix": ENVVAR_PREFIX},
)
@click.version_option(__version__, prog_name="hearth")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar=ROOT_ENV_VAR,
    show_envvar=True,
    help="Project root holding the .env files. Defaults to the current directory.",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force or disable colored console output. Defaults to auto-detection.",
)
@click.option(
    "-v",
    "--verbose",
    "verbose",
    count=True,
    help="Show one more level of detail than WARNING per repetition (-v, -vv).",
)
@click.option(
    "-q",
    "--quiet",
    "quiet",
    count=True,
    help="Show one level less than WARNING per repetition (-q, -qq).",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Show DEBUG records with logger names and source locations.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=tuple(
        f"{name}={logging.getLevelName(lvl)}" for name, lvl in DEFAULT_LIB_LEVELS.items()
    ),
    show_default=True,
    show_envvar=True,
    help=(
        "Minimum LEVEL of the logger NAME (NAME=LEVEL), for the console and the "
        "flight recorder. Repeat the option, or list several pairs in "
        "HEARTH_LOGGER_LEVELS."
    ),
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    show_envvar=True,
    help=(
        "Buffer recent DEBUG records in memory and write them to --log-path as "
        "soon as a WARNING or worse is logged."
    ),
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=default_recorder_path,
    show_default="<user log dir>/latest.log",
    envvar="HEARTH_LOG_PATH",
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_RECORDER_CAPACITY,
    hidden=True,
    help="Number of records kept by the flight recorder.",
)
@click.option(
    "--force-flush/--no-force-flush",
    default=False,
    show_default=True,
    help="Also write the flight recorder buffer when the command exits.",
)
@click.pass_context
def hearth(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    root: Path | None,
    color: bool | None,
    verbose: int,
    quiet: int,
    debug: bool,
    logger_levels: dict[str, int],
    flight_recorder: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    force_flush: bool,
) -> None:
    """Hearth command-line interface."""
    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.color = color

    level = verbosity_level(verbose, quiet)
    recorder_path = log_path if flight_recorder else None
    handlers = setup_cli_logging(
        level=level,
        debug=debug,
        color=color is not False,
        recorder_path=recorder_path,
        recorder_capacity=flight_recorder_capacity,
        flush_on_close=force_flush,
        logger_levels=logger_levels,
    )
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        logger_levels=logger_levels,
        recorder_path=recorder_path,
        recorder_capacity=flight_recorder_capacity if flight_recorder else None,
        flush_on_close=force_flush,
    )

    ctx.call_on_close(logging.shutdown)


hearth.add_command(info)
hearth.add_command(check)
hearth.add_command(cache_group)
