"""The application facade.

`Application` holds one instance of every bootstrapped dependency and exposes
them through read-only accessors. Two routing helpers, the URL generator and
the URL matcher, are derived lazily from the route table and the request
context and memoized for the lifetime of the facade.

Memoization has no invalidation path: replacing the route table with
`Application.set_routes` after a generator or matcher was built leaves them
bound to the previous route table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from hearth.adapters.cache import CacheRegistry, TagAwareFilesystemCache
from hearth.adapters.db.engine import dispose_session
from hearth.adapters.routing import UrlGenerator, UrlMatcher
from hearth.errors import (
    CapabilityNotEnabledError,
    RequestContextNotSetError,
    RoutesNotSetError,
)
from hearth.logging import detach_handlers

if TYPE_CHECKING:
    from jinja2 import Environment
    from sqlalchemy.orm import Session
    from werkzeug.routing import Map
    from werkzeug.wrappers import Request

    from hearth.adapters.mailer import Mailer
    from hearth.adapters.routing import RequestContext
    from hearth.config import Settings
    from hearth.interfaces.cache import PruneableCache

logger = logging.getLogger(__name__)

APP_CACHE = "app"


class DependencyKey(str, Enum):
    """Identifies each dependency held by the facade.

    Values are the names of the matching `Application` accessors.
    """

    REQUEST = "request"
    REQUEST_CONTEXT = "request_context"
    LOGGER = "logger"
    TEMPLATE_ENGINE = "template_engine"
    MAILER = "mailer"
    ENTITY_MANAGER = "entity_manager"
    ROUTE_TABLE = "routes"
    CACHE_REGISTRY = "cache_registry"


class Capability(str, Enum):
    """Optional features of the facade, selected at bootstrap."""

    LOGGING = "logging"
    ROUTE_MATCHING = "route_matching"


ALL_CAPABILITIES = frozenset(Capability)


def build_cache_registry(settings: Settings) -> CacheRegistry:
    """Build the cache registry with its single ``app`` cache."""
    return CacheRegistry(
        {
            APP_CACHE: TagAwareFilesystemCache(
                APP_CACHE, settings.cache_default_lifespan, settings.cache_dir
            )
        }
    )


class Application:  # pylint: disable=too-many-instance-attributes
    """Single point of access to the bootstrapped dependencies."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        request: Request,
        request_context: RequestContext,
        template_engine: Environment,
        mailer: Mailer | None,
        entity_manager: Session,
        routes: Map | None,
        settings: Settings,
        *,
        logger: logging.Logger | None = None,
        capabilities: Iterable[Capability] = ALL_CAPABILITIES,
        cache_registry: CacheRegistry | None = None,
    ) -> None:
        self._capabilities = frozenset(capabilities)
        if Capability.LOGGING in self._capabilities and logger is None:
            raise ValueError("The logging capability requires a logger")

        self._settings = settings
        self._request = request
        self._request_context = request_context
        self._url_generator: UrlGenerator | None = None
        self._url_matcher: UrlMatcher | None = None
        self._routes: Map | None = None
        self.set_routes(routes)

        template_engine.globals["app"] = {
            "env": settings.app_env,
            "debug": settings.app_debug,
            "request": request,
        }
        self._template_engine = template_engine
        template_engine.globals["path"] = self._make_path_function()

        self._logger = logger
        self._mailer = mailer
        self._entity_manager = entity_manager
        self._cache_registry = (
            build_cache_registry(settings) if cache_registry is None else cache_registry
        )
        self._closed = False

    # --- Accessors ---

    @property
    def settings(self) -> Settings:
        """The settings the application was built with."""
        return self._settings

    @property
    def capabilities(self) -> frozenset[Capability]:
        """The enabled capabilities."""
        return self._capabilities

    @property
    def request(self) -> Request:
        """The current request."""
        return self._request

    @property
    def request_context(self) -> RequestContext:
        """The routing context of the current request."""
        return self._request_context

    @property
    def logger(self) -> logging.Logger:
        """The application logger.

        Raises:
            CapabilityNotEnabledError: If logging is not enabled.
        """
        self._require(Capability.LOGGING)
        assert self._logger is not None
        return self._logger

    @property
    def template_engine(self) -> Environment:
        """The template engine."""
        return self._template_engine

    @property
    def mailer(self) -> Mailer | None:
        """The mailer, or None when no ``MAILER_DSN`` is configured."""
        return self._mailer

    @property
    def entity_manager(self) -> Session:
        """The ORM session."""
        return self._entity_manager

    @property
    def routes(self) -> Map | None:
        """The current route table, or None if none was supplied yet."""
        return self._routes

    @property
    def cache_registry(self) -> CacheRegistry:
        """The registry of named caches."""
        return self._cache_registry

    def get(self, key: DependencyKey) -> Any:
        """Return the dependency identified by ``key``."""
        return getattr(self, DependencyKey(key).value)

    def has_capability(self, capability: Capability) -> bool:
        """Return True if ``capability`` is enabled."""
        return capability in self._capabilities

    def get_cache(self, name: str) -> PruneableCache:
        """Return the cache registered under ``name``.

        Raises:
            CacheNotFoundError: If no cache is registered under ``name``.
        """
        return self._cache_registry.get_cache(name)

    # --- Routing ---

    def set_routes(self, routes: Map | None) -> Application:
        """Replace the route table.

        A URL generator or matcher that was already built keeps using the
        route table it was built with.
        """
        self._routes = routes
        return self

    def get_url_generator(self) -> UrlGenerator:
        """Return the URL generator, building it on first use.

        Raises:
            RoutesNotSetError: If no route table is set.
            RequestContextNotSetError: If no request context is set.
        """
        self._check_routing_preconditions()
        if self._url_generator is None:
            assert self._routes is not None
            self._url_generator = UrlGenerator(self._routes, self._request_context)
            logger.debug("Built URL generator")
        return self._url_generator

    def get_url_matcher(self) -> UrlMatcher:
        """Return the URL matcher, building it on first use.

        Raises:
            CapabilityNotEnabledError: If route matching is not enabled.
            RoutesNotSetError: If no route table is set.
            RequestContextNotSetError: If no request context is set.
        """
        self._require(Capability.ROUTE_MATCHING)
        self._check_routing_preconditions()
        if self._url_matcher is None:
            assert self._routes is not None
            self._url_matcher = UrlMatcher(self._routes, self._request_context)
            logger.debug("Built URL matcher")
        return self._url_matcher

    # --- Templates ---

    def set_template_global(self, name: str, value: Any) -> Application:
        """Set a global of the template engine, replacing any previous value."""
        self._template_engine.globals[name] = value
        return self

    def render(self, template_name: str, **context: Any) -> str:
        """Render a template of the template engine."""
        return self._template_engine.get_template(template_name).render(**context)

    # --- Lifecycle ---

    def close(self) -> None:
        """Release the session, engine, caches, mailer and log files.

        Calling it more than once has no further effect.
        """
        if self._closed:
            return
        self._closed = True

        dispose_session(self._entity_manager)
        self._cache_registry.close()
        if self._mailer is not None:
            self._mailer.close()
        if self._logger is not None:
            detach_handlers(self._logger)
        logger.debug("Application closed")

    def __enter__(self) -> Application:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # --- Internal Helpers ---

    def _require(self, capability: Capability) -> None:
        if capability not in self._capabilities:
            raise CapabilityNotEnabledError(capability)

    def _check_routing_preconditions(self) -> None:
        if self._routes is None:
            raise RoutesNotSetError
        if self._request_context is None:
            raise RequestContextNotSetError

    def _make_path_function(self) -> Callable[..., str]:
        """Build the ``path`` template function.

        The function keeps the first URL generator it obtains. It is resolved
        now when routes are already available, otherwise on the first call.
        """
        generator: UrlGenerator | None = None
        if self._routes is not None and self._request_context is not None:
            generator = self.get_url_generator()

        def path(name: str, params: Mapping[str, Any] | None = None) -> str:
            nonlocal generator
            if generator is None:
                generator = self.get_url_generator()
            return generator.generate(name, params)

        return path
