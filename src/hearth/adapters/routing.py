"""Routing helpers bound to a request context.

The route table is a `werkzeug.routing.Map` whose rules are named by their
endpoint. `UrlGenerator` turns a rule name and parameters into a URL;
`UrlMatcher` turns a path into the matching rule name and its parameters. Both
are bound once, at construction, to the route table and request context they
are given and keep referencing that exact route table afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from werkzeug.routing import Map, MapAdapter
    from werkzeug.wrappers import Request

HTTP_PORT = 80
HTTPS_PORT = 443


def _split_host(host: str) -> tuple[str, int | None]:
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit():
        return name, int(port)
    return host, None


@dataclass(frozen=True)
class RequestContext:  # pylint: disable=too-many-instance-attributes
    """The parts of a request that routing depends on.

    Attributes:
        base_url: Mount point of the application (WSGI ``SCRIPT_NAME``).
        method: HTTP method.
        host: Host name, without port.
        scheme: ``http`` or ``https``.
        http_port: Port used for ``http`` URLs.
        https_port: Port used for ``https`` URLs.
        path_info: Path below ``base_url``.
        query_string: Raw query string, without the leading ``?``.
    """

    base_url: str = ""
    method: str = "GET"
    host: str = "localhost"
    scheme: str = "http"
    http_port: int = HTTP_PORT
    https_port: int = HTTPS_PORT
    path_info: str = "/"
    query_string: str = ""

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        """Mirror the routing-relevant parts of a request.

        The request's port becomes the port of its own scheme; the other
        scheme keeps its default port.
        """
        host, port = _split_host(request.host)
        secure = request.scheme == "https"
        if port is None:
            port = HTTPS_PORT if secure else HTTP_PORT
        return cls(
            base_url=request.root_path,
            method=request.method,
            host=host,
            scheme=request.scheme,
            http_port=HTTP_PORT if secure else port,
            https_port=port if secure else HTTPS_PORT,
            path_info=request.path,
            query_string=request.query_string.decode("latin-1"),
        )

    @property
    def port(self) -> int:
        """Port of the context's own scheme."""
        return self.https_port if self.scheme == "https" else self.http_port

    @property
    def server_name(self) -> str:
        """Host with the port appended when it is not the scheme's default."""
        default = HTTPS_PORT if self.scheme == "https" else HTTP_PORT
        return self.host if self.port == default else f"{self.host}:{self.port}"

    def bind(self, routes: Map) -> MapAdapter:
        """Bind a route table to this context."""
        return routes.bind(
            self.server_name,
            script_name=self.base_url or None,
            url_scheme=self.scheme,
            default_method=self.method,
            path_info=self.path_info,
            query_args=self.query_string,
        )


@dataclass(frozen=True)
class RouteMatch:
    """Result of matching a path against the route table."""

    route: str
    params: dict[str, Any] = field(default_factory=dict)


class UrlGenerator:
    """Builds URLs for named routes."""

    def __init__(self, routes: Map, context: RequestContext) -> None:
        self.routes = routes
        self.context = context
        self._adapter = context.bind(routes)

    def generate(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        absolute: bool = False,
    ) -> str:
        """Build the URL of the route ``name``.

        Parameters that are not part of the route become query arguments.

        Args:
            name: Route name (the rule's endpoint).
            params: Route parameters.
            absolute: Return a URL with scheme and host instead of a path.

        Returns:
            str: The URL.

        Raises:
            werkzeug.routing.BuildError: If no route named ``name`` accepts
                ``params``.
        """
        return self._adapter.build(name, dict(params or {}), force_external=absolute)


class UrlMatcher:
    """Resolves paths to named routes."""

    def __init__(self, routes: Map, context: RequestContext) -> None:
        self.routes = routes
        self.context = context
        self._adapter = context.bind(routes)

    def match(self, path_info: str | None = None, method: str | None = None) -> RouteMatch:
        """Match a path against the route table.

        Args:
            path_info: Path to match. Defaults to the context's path.
            method: HTTP method. Defaults to the context's method.

        Returns:
            RouteMatch: The matching route name and its converted parameters.

        Raises:
            werkzeug.exceptions.NotFound: If no route matches the path.
            werkzeug.exceptions.MethodNotAllowed: If the path matches only
                for other methods.
        """
        endpoint, params = self._adapter.match(path_info, method)
        return RouteMatch(route=endpoint, params=dict(params))
