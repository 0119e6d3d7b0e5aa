"""Logging setup for Hearth.

Hearth logs for two audiences:

* The operator of the ``hearth`` CLI reads a Rich console on stderr. A
  "flight recorder" keeps the recent DEBUG history in memory and writes it to
  a file as soon as something goes wrong, so the console can stay quiet.
* The application writes through the ``hearth.app`` logger into per-environment
  files below ``LOG_PATH`` (see `APP_LOG_SINKS`).
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "hearth"

APP_FILE_FORMAT = "[%(asctime)s] %(name)s.%(levelname)s: %(message)s"
CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

DEFAULT_RECORDER_CAPACITY = 2000

#: Distributions whose versions are reported at CLI startup.
REPORTED_DISTRIBUTIONS = ("sqlalchemy", "jinja2", "werkzeug", "diskcache")

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


@dataclass(frozen=True)
class LogSink:
    """A level-filtered log file of the application logger.

    Attributes:
        filename: File name, relative to the environment's log directory.
        level: Minimum level written to the file.
        environments: ``APP_ENV`` values the sink is enabled for; None
            enables it everywhere.
    """

    filename: str
    level: int
    environments: frozenset[str] | None = None

    def enabled_for(self, env: str) -> bool:
        """Return True if the sink is written in environment ``env``."""
        return self.environments is None or env in self.environments


APP_LOG_SINKS = (
    LogSink("app.log", logging.WARNING),
    LogSink("debug.log", logging.DEBUG, frozenset({"dev"})),
)


class LibraryPrefixFilter(logging.Filter):
    """Tag records of other libraries with a ``[library]`` prefix.

    Sets ``record.prefix`` to the top-level package of the logger name (e.g.
    ``sqlalchemy.engine.Engine`` gives ``[sqlalchemy]``), or to an empty string
    for Hearth's own loggers. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.partition(".")[0]
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


# --- Application logger ---


def file_handler(path: Path, level: int) -> logging.FileHandler:
    """Return a handler appending records at ``level`` and above to ``path``.

    Missing parent directories are created; the file itself is opened lazily,
    on the first record.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8", delay=True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(APP_FILE_FORMAT))
    return handler


def detach_handlers(logger: logging.Logger) -> None:
    """Remove and close every handler attached to ``logger``."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_app_logger(
    name: str,
    log_dir: Path,
    env: str,
    sinks: Iterable[LogSink] = APP_LOG_SINKS,
) -> logging.Logger:
    """Build a logger named ``name`` writing to the sinks enabled for ``env``.

    The logger is not registered with `logging.getLogger`: every call returns
    a new instance owning its handlers, so closing one application never
    touches the files of another. It passes every record to its handlers and
    does not propagate to the root logger.

    Args:
        name: Logger name.
        log_dir: Directory holding the log files of the environment.
        env: The ``APP_ENV`` value.
        sinks: Candidate sinks.

    Returns:
        logging.Logger: The configured logger.

    Raises:
        OSError: If the log directory cannot be created.
    """
    app_logger = logging.Logger(name, logging.DEBUG)
    app_logger.propagate = False
    try:
        for sink in sinks:
            if sink.enabled_for(env):
                app_logger.addHandler(file_handler(log_dir / sink.filename, sink.level))
    except BaseException:
        detach_handlers(app_logger)
        raise
    return app_logger


# --- CLI logging ---


def verbosity_level(verbose: int = 0, quiet: int = 0) -> int:
    """Shift the WARNING default by one level per ``-v`` / ``-q``.

    The result is clamped to the DEBUG..CRITICAL range.
    """
    level = logging.WARNING - 10 * verbose + 10 * quiet
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def console_handler(
    level: int = logging.WARNING, *, debug: bool = False, color: bool = True
) -> RichHandler:
    """Return a Rich handler writing to stderr.

    In debug mode everything from DEBUG up is shown, with timestamps, logger
    names and source locations. Otherwise records of other libraries get a
    short prefix (see `LibraryPrefixFilter`).

    Args:
        level: Minimum level shown outside debug mode.
        debug: Enable debug formatting.
        color: Emit ANSI colors (auto-detected) when True.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug,
        enable_link_path=debug,
    )
    handler.setFormatter(
        logging.Formatter(DEBUG_CONSOLE_FORMAT if debug else CONSOLE_FORMAT)
    )
    if not debug:
        handler.addFilter(LibraryPrefixFilter())
    return handler


def flight_recorder(
    path: Path,
    capacity: int = DEFAULT_RECORDER_CAPACITY,
    *,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return a memory handler that dumps its buffer to ``path``.

    Up to ``capacity`` records are kept. The buffer is written when a record
    at ``flush_level`` or above arrives, when it is full, and, with
    ``flush_on_close``, when logging shuts down. The file is truncated when
    the recorder is created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def setup_cli_logging(  # pylint: disable=too-many-arguments
    *,
    level: int,
    debug: bool = False,
    color: bool = True,
    recorder_path: Path | None = None,
    recorder_capacity: int = DEFAULT_RECORDER_CAPACITY,
    flush_on_close: bool = False,
    logger_levels: Mapping[str, int] | None = None,
) -> list[logging.Handler]:
    """Route every record to the console and, optionally, a flight recorder.

    The root logger is reset and lets everything through; the handlers do the
    filtering. ``logger_levels`` then raises (or lowers) the minimum level of
    individual loggers for both outputs.

    Args:
        level: Console level outside debug mode.
        debug: Enable debug console formatting.
        color: Enable console colors.
        recorder_path: Flight recorder file, or None to disable the recorder.
        recorder_capacity: Flight recorder buffer size, in records.
        flush_on_close: Write the recorder buffer on shutdown.
        logger_levels: Minimum level per logger name.

    Returns:
        list[logging.Handler]: The handlers attached to the root logger.
    """
    handlers: list[logging.Handler] = [
        console_handler(level, debug=debug, color=color)
    ]
    if recorder_path is not None:
        handlers.append(
            flight_recorder(
                recorder_path, recorder_capacity, flush_on_close=flush_on_close
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, logger_level in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(logger_level)
    return handlers


def log_startup(  # pylint: disable=too-many-arguments
    logger: logging.Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    logger_levels: Mapping[str, int],
    recorder_path: Path | None = None,
    recorder_capacity: int | None = None,
    flush_on_close: bool = False,
) -> None:
    """Log a one-line INFO summary of the CLI session, then DEBUG diagnostics.

    The diagnostics cover the interpreter, platform, process, the versions of
    the main libraries, the active handlers, the flight recorder and the
    per-logger levels.
    """
    logger.info(
        "Hearth %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "OFF" if recorder_path is None else "ON",
    )
    for label, value in _environment_report():
        logger.debug("%s: %s", label, value)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if recorder_path is not None:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            recorder_path,
            recorder_capacity,
            flush_on_close,
        )
    logger.debug(
        "Per-logger levels: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )


def _environment_report() -> list[tuple[str, str]]:
    report = [
        ("Python", sys.version.split()[0]),
        ("Platform", f"{platform.system()} {platform.release()}"),
        ("PID", str(os.getpid())),
        ("CWD", str(Path.cwd())),
    ]
    report.extend((name, _distribution_version(name)) for name in REPORTED_DISTRIBUTIONS)
    return report


def _distribution_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:  # pragma: no cover
        return "unknown"
