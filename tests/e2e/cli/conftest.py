"""Fixtures for end-to-end tests of the ``hearth`` CLI.

Provides a `log-demo` command emitting log records at every level, a
CliRunner, an isolated filesystem, and an `invoke` helper that always passes
``--no-flight-recorder`` unless told otherwise.
"""

import logging
from collections.abc import Callable

import click
import pytest
from click.testing import CliRunner, Result

from hearth.entrypoints.cli.main import hearth

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit log records on a project logger and a third-party logger."""
    logger = logging.getLogger("hearth.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    logging.getLogger("some.thirdparty").warning("Third-party warning.")


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    hearth.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        hearth.commands.pop("log-demo", None)


@pytest.fixture
def runner() -> CliRunner:
    """Return a Click CliRunner."""
    return CliRunner()


@pytest.fixture
def fs(runner: CliRunner):
    """Run the test inside runner.isolated_filesystem()."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def invoke(runner: CliRunner) -> Callable[..., Result]:
    """Invoke ``hearth`` with the given arguments and no flight recorder."""

    def _invoke(*args: str, flight_recorder: bool = False, **kwargs) -> Result:
        options = [] if flight_recorder else ["--no-flight-recorder"]
        return runner.invoke(hearth, [*options, *args], **kwargs)

    return _invoke


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the logging configuration a CLI invocation leaves behind.

    Each invocation reconfigures the root logger and may change the level of
    named loggers (``-L``); later tests must start from a clean state.
    """
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)
    for name in ("hearth.demo", "sqlalchemy", "werkzeug"):
        logging.getLogger(name).setLevel(logging.NOTSET)
