"""Bootstrap the application facade from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, MutableMapping
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING, Any
from wsgiref.util import setup_testing_defaults

from jinja2 import Environment, FileSystemBytecodeCache, FileSystemLoader, select_autoescape
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session
from werkzeug.wrappers import Request

from hearth import config
from hearth.adapters.db.discovery import ENTITY_PACKAGE, discover_entities
from hearth.adapters.db.engine import check_connection, dispose_session, make_engine
from hearth.adapters.mailer import Mailer
from hearth.adapters.routing import RequestContext
from hearth.config import Settings
from hearth.logging import configure_app_logger, detach_handlers

from .application import (
    ALL_CAPABILITIES,
    Application,
    Capability,
    build_cache_registry,
)

if TYPE_CHECKING:
    from werkzeug.routing import Map

logger = logging.getLogger(__name__)

APP_LOGGER_NAME = "hearth.app"


def build_template_engine(settings: Settings) -> Environment:
    """Build the template engine.

    Templates are read from ``settings.template_dir``; compiled templates are
    cached in ``settings.template_cache_dir``. In debug mode templates are
    reloaded when they change and the ``{% debug %}`` tag is available.
    """
    cache_dir = settings.template_cache_dir
    cache_dir.mkdir(parents=True, exist_ok=True)
    return Environment(
        loader=FileSystemLoader(settings.template_dir),
        bytecode_cache=FileSystemBytecodeCache(str(cache_dir)),
        autoescape=select_autoescape(default_for_string=True, default=True),
        auto_reload=settings.app_debug,
        extensions=["jinja2.ext.debug"] if settings.app_debug else [],
    )


def build_mailer(settings: Settings) -> Mailer | None:
    """Build the mailer, or return None when ``MAILER_DSN`` is not set."""
    if not settings.mailer_dsn:
        return None
    return Mailer.from_dsn(settings.mailer_dsn)


def build_entity_manager(settings: Settings, package: str = ENTITY_PACKAGE) -> Session:
    """Connect to the database and return a session over the discovered entities.

    Raises:
        DatabaseUrlNotSetError: If ``DATABASE_URL`` is not set.
        sqlalchemy.exc.ArgumentError: If the URL cannot be parsed.
        sqlalchemy.exc.OperationalError: If the database is not reachable.
    """
    url = make_url(settings.get_db_url())
    engine = make_engine(url, echo=settings.app_debug)
    try:
        discover_entities(package)
        check_connection(engine)
    except BaseException:
        engine.dispose()
        raise
    return Session(engine)


def build_logger(settings: Settings) -> logging.Logger:
    """Build the application logger.

    WARNING and above always go to ``app.log``; in the ``dev`` environment
    everything from DEBUG up also goes to ``debug.log``. Every call returns a
    new logger; its handlers belong to the caller.
    """
    return configure_app_logger(APP_LOGGER_NAME, settings.log_dir, settings.app_env)


def build_request(environ: Mapping[str, Any]) -> Request:
    """Build the current request from a WSGI (or CGI-style) environ.

    Keys a WSGI environ requires but ``environ`` lacks are filled with
    defaults, so the process environment of a CGI invocation works as is.
    """
    wsgi_environ = dict(environ)
    setup_testing_defaults(wsgi_environ)
    return Request(wsgi_environ)


def build_request_context(request: Request) -> RequestContext:
    """Build the routing context of a request."""
    return RequestContext.from_request(request)


class Bootstrapper:
    """Builds an `Application` from the environment of a project root.

    Args:
        root_path: Project root holding the env files. Defaults to
            `hearth.config.get_root_path`.
        environ: Environment mapping to load into and read from. Defaults to
            ``os.environ``.
        capabilities: Optional facade features to enable.
        entity_package: Package whose modules declare the entities.
    """

    def __init__(
        self,
        root_path: str | Path | None = None,
        environ: MutableMapping[str, str] | None = None,
        capabilities: Iterable[Capability] = ALL_CAPABILITIES,
        entity_package: str = ENTITY_PACKAGE,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.root_path = (
            Path(root_path).resolve()
            if root_path is not None
            else config.get_root_path(self.environ)
        )
        self.capabilities = frozenset(capabilities)
        self.entity_package = entity_package

    def load_environment(self) -> dict[str, str]:
        """Load the layered env files of the project root."""
        return config.load_environment(self.root_path, self.environ)

    def build_settings(self) -> Settings:
        """Assemble the settings from the (loaded) environment."""
        return Settings.from_environ(self.environ, self.root_path)

    def create_application(
        self,
        routes: Map | None = None,
        wsgi_environ: Mapping[str, Any] | None = None,
    ) -> Application:
        """Build every dependency and return the facade.

        Args:
            routes: The route table. May be supplied later through
                `Application.set_routes`.
            wsgi_environ: Environ of the current request. Defaults to the
                process environment.

        Returns:
            Application: The assembled facade.

        Raises:
            DatabaseUrlNotSetError: If ``DATABASE_URL`` is not set.
            sqlalchemy.exc.SQLAlchemyError: If the database URL is invalid or
                the database is not reachable.
            OSError: If the log or cache directories cannot be created.
        """
        loaded = self.load_environment()
        settings = self.build_settings()
        logger.debug(
            "Bootstrapping %s (env=%s, debug=%s, %d variable(s) from env files)",
            settings.root_path,
            settings.app_env,
            settings.app_debug,
            len(loaded),
        )

        # Everything acquired so far is released if a later step raises.
        with ExitStack() as stack:
            template_engine = build_template_engine(settings)
            mailer = build_mailer(settings)
            logger.debug("Mailer %s", "configured" if mailer else "not configured")
            if mailer is not None:
                stack.callback(mailer.close)
            entity_manager = build_entity_manager(settings, self.entity_package)
            stack.callback(dispose_session, entity_manager)

            app_logger = None
            if Capability.LOGGING in self.capabilities:
                app_logger = build_logger(settings)
                stack.callback(detach_handlers, app_logger)

            request = build_request(self.environ if wsgi_environ is None else wsgi_environ)
            request_context = build_request_context(request)
            cache_registry = build_cache_registry(settings)
            stack.callback(cache_registry.close)

            application = Application(
                request,
                request_context,
                template_engine,
                mailer,
                entity_manager,
                routes,
                settings,
                logger=app_logger,
                capabilities=self.capabilities,
                cache_registry=cache_registry,
            )
            stack.pop_all()
        return application


def create_application(
    routes: Map | None = None,
    wsgi_environ: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Application:
    """Bootstrap an `Application`; keyword arguments go to `Bootstrapper`."""
    return Bootstrapper(**kwargs).create_application(routes, wsgi_environ)
