"""Configuration for Hearth.

This module loads the layered ``.env`` files of a project into the process
environment and assembles the immutable `Settings` object. Settings are read
from the environment exactly once and then passed explicitly to every builder.

Layering (later files win on conflicting keys):

1. ``.env``
2. ``.env.local``
3. ``.env.{APP_ENV}``
4. ``.env.{APP_ENV}.local``

Variables already present in the real process environment are never
overridden, and missing files are skipped.
"""

from __future__ import annotations

import logging
import os
import warnings
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import dotenv_values
from rich.traceback import install as install_rich_traceback

from hearth.errors import ConfigError, InvalidSettingError

logger = logging.getLogger(__name__)

ROOT_ENV_VAR = "HEARTH_ROOT"

BASE_ENV_FILES = (".env", ".env.local")
ENV_SPECIFIC_ENV_FILES = (".env.{env}", ".env.{env}.local")

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


class DatabaseUrlNotSetError(ConfigError):
    """Raised when the DATABASE_URL environment variable is not set."""

    def __init__(self) -> None:
        super().__init__("DATABASE_URL is not set")


class Environment(str, Enum):
    """Application environments that carry a policy.

    Any other ``APP_ENV`` value is accepted but applies no policy.
    """

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


def get_root_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the project root directory.

    Args:
        environ: Environment mapping to read ``HEARTH_ROOT`` from. Defaults to
            ``os.environ``.

    Returns:
        The ``HEARTH_ROOT`` directory if set, otherwise the current working
        directory.
    """
    environ = os.environ if environ is None else environ
    return Path(environ.get(ROOT_ENV_VAR) or Path.cwd()).resolve()


def env_files_for(env: str | None) -> list[str]:
    """Return the names of the env files to load, in precedence order."""
    names = list(BASE_ENV_FILES)
    if env:
        names.extend(pattern.format(env=env) for pattern in ENV_SPECIFIC_ENV_FILES)
    return names


def load_environment(
    root: Path, environ: MutableMapping[str, str] | None = None
) -> dict[str, str]:
    """Load the layered env files found in ``root`` into ``environ``.

    ``APP_ENV`` is read after the base files are loaded, so ``.env`` may select
    the environment. Once the environment-specific files are loaded, the
    policy of that environment is applied (see `apply_environment_policy`).

    Args:
        root: Directory containing the env files.
        environ: Mapping to populate. Defaults to ``os.environ``.

    Returns:
        The variables that were set from files, with their final values.
    """
    environ = os.environ if environ is None else environ
    protected = frozenset(environ)
    loaded: dict[str, str] = {}

    def _load(name: str) -> None:
        path = root / name
        if not path.is_file():
            logger.debug("Env file %s not found, skipping", path)
            return
        count = 0
        for key, value in dotenv_values(path).items():
            if value is None or key in protected:
                continue
            environ[key] = value
            loaded[key] = value
            count += 1
        logger.debug("Loaded %d variable(s) from %s", count, path)

    for name in BASE_ENV_FILES:
        _load(name)

    if env := environ.get("APP_ENV"):
        for name in env_files_for(env)[len(BASE_ENV_FILES) :]:
            _load(name)
        apply_environment_policy(env)

    return loaded


def apply_environment_policy(env: str) -> Environment | None:
    """Apply the fixed policy of a known environment.

    ``dev`` turns on detailed error display: rich tracebacks for uncaught
    exceptions and display of every Python warning. ``test`` and ``prod`` keep
    the interpreter defaults.

    Args:
        env: The ``APP_ENV`` value.

    Returns:
        The matching `Environment`, or None when the name is not recognized.
    """
    try:
        environment = Environment(env)
    except ValueError:
        logger.debug("No policy for environment %r", env)
        return None

    if environment is Environment.DEV:
        install_rich_traceback()
        warnings.simplefilter("default")
    return environment


def _parse_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in TRUTHY_VALUES


def _parse_int(name: str, value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise InvalidSettingError(name, value, "expected an integer") from e


def _under_root(root: Path, fragment: str) -> Path:
    # "/var/log/" is relative to the project root, not the filesystem root
    return root / fragment.strip("/")


@dataclass(frozen=True)
class Settings:  # pylint: disable=too-many-instance-attributes
    """Immutable application settings.

    Attributes:
        root_path: Project root; every configured path is resolved below it.
        app_env: Environment name (``APP_ENV``).
        app_debug: Debug flag (``APP_DEBUG``).
        database_url: SQLAlchemy database URL (``DATABASE_URL``).
        mailer_dsn: Mail transport DSN (``MAILER_DSN``).
        log_path: Log directory fragment (``LOG_PATH``).
        log_level: Configured log level name (``LOG_LEVEL``).
        cache_path: Cache directory fragment (``CACHE_PATH``).
        cache_default_lifespan: Default cache item lifespan in seconds
            (``CACHE_DEFAULT_LIFESPAN``).
        template_path: Template directory fragment (``TWIG_TEMPLATE_PATH``).
    """

    root_path: Path
    app_env: str = Environment.DEV.value
    app_debug: bool = False
    database_url: str | None = None
    mailer_dsn: str | None = None
    log_path: str = "/var/log/"
    log_level: str = "debug"
    cache_path: str = "/var/cache/"
    cache_default_lifespan: int = 3600
    template_path: str = "/templates"

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | None = None, root_path: Path | None = None
    ) -> Settings:
        """Build settings from an environment mapping.

        Empty values are treated as unset.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.
            root_path: Project root. Defaults to `get_root_path`.

        Returns:
            The assembled settings.

        Raises:
            InvalidSettingError: If ``CACHE_DEFAULT_LIFESPAN`` is not an integer.
        """
        environ = os.environ if environ is None else environ
        root = Path(root_path) if root_path is not None else get_root_path(environ)
        return cls(
            root_path=root,
            app_env=environ.get("APP_ENV") or cls.app_env,
            app_debug=_parse_bool(environ.get("APP_DEBUG")),
            database_url=environ.get("DATABASE_URL") or None,
            mailer_dsn=environ.get("MAILER_DSN") or None,
            log_path=environ.get("LOG_PATH") or cls.log_path,
            log_level=environ.get("LOG_LEVEL") or cls.log_level,
            cache_path=environ.get("CACHE_PATH") or cls.cache_path,
            cache_default_lifespan=_parse_int(
                "CACHE_DEFAULT_LIFESPAN",
                environ.get("CACHE_DEFAULT_LIFESPAN"),
                cls.cache_default_lifespan,
            ),
            template_path=environ.get("TWIG_TEMPLATE_PATH") or cls.template_path,
        )

    def get_db_url(self) -> str:
        """Return the database URL.

        Raises:
            DatabaseUrlNotSetError: If ``DATABASE_URL`` is not set.
        """
        if not self.database_url:
            raise DatabaseUrlNotSetError
        return self.database_url

    @property
    def environment(self) -> Environment | None:
        """The known environment for ``app_env``, if any."""
        try:
            return Environment(self.app_env)
        except ValueError:
            return None

    @property
    def log_dir(self) -> Path:
        """Directory holding ``app.log`` and ``debug.log``."""
        return _under_root(self.root_path, self.log_path) / self.app_env

    @property
    def cache_dir(self) -> Path:
        """Directory of the application caches for this environment."""
        return _under_root(self.root_path, self.cache_path) / self.app_env

    @property
    def template_dir(self) -> Path:
        """Directory the template loader reads from."""
        return _under_root(self.root_path, self.template_path)

    @property
    def template_cache_dir(self) -> Path:
        """Engine-private directory for compiled templates."""
        return self.cache_dir / "jinja"
