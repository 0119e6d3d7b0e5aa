"""Global pytest fixtures for Hearth."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest import mock

import pytest

pytest_plugins = [
    "tests.fixtures.project",
]

# Variables read by hearth; a developer's shell must not leak into the tests
HEARTH_VARIABLES = (
    "HEARTH_ROOT",
    "APP_ENV",
    "APP_DEBUG",
    "DATABASE_URL",
    "MAILER_DSN",
    "LOG_PATH",
    "LOG_LEVEL",
    "CACHE_PATH",
    "CACHE_DEFAULT_LIFESPAN",
    "TWIG_TEMPLATE_PATH",
)


@pytest.fixture(autouse=True)
def isolated_environ() -> Iterator[None]:
    """Restore ``os.environ`` after every test and start without hearth variables.

    Loading env files writes into the process environment; patching the whole
    mapping keeps those writes local to one test.
    """
    with mock.patch.dict(os.environ):
        for name in [*HEARTH_VARIABLES, *(k for k in os.environ if k.startswith("HEARTH_"))]:
            os.environ.pop(name, None)
        yield


@pytest.fixture(autouse=True)
def no_rich_traceback(monkeypatch: pytest.MonkeyPatch) -> mock.Mock:
    """Keep the ``dev`` policy from replacing ``sys.excepthook`` during tests."""
    install = mock.Mock(name="install_rich_traceback")
    monkeypatch.setattr("hearth.config.install_rich_traceback", install)
    return install


TESTS_ROOT = Path(__file__).parent.resolve()
FOLDER_MARKERS = ("unit", "integration", "e2e")


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config,  # pylint: disable=unused-argument
    items: list[pytest.Item],
) -> None:
    """Mark every test with the name of its top-level folder (unit/integration/e2e)."""
    for item in items:
        relative = item.path.resolve().relative_to(TESTS_ROOT)
        folder = relative.parts[0] if len(relative.parts) > 1 else None
        if folder not in FOLDER_MARKERS:
            continue
        if not any(marker.name == folder for marker in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, folder))
