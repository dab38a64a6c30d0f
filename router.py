"""Routing table for method/path handlers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from request import HTTPRequest, Method
from response import HTTPResponse

Handler = Callable[[HTTPRequest, str], HTTPResponse]


@dataclass(frozen=True, slots=True)
class Route:
    path: str
    handler: Handler
    prefix: bool = False

    def match(self, path: str) -> str | None:
        """Return the captured suffix when ``path`` matches, else None."""
        if self.prefix:
            if path.startswith(self.path):
                return path[len(self.path) :]
            return None
        return "" if path == self.path else None


class Router:
    """Ordered routes per method; the first registered match wins."""

    def __init__(self) -> None:
        self._routes: dict[Method, list[Route]] = {method: [] for method in Method}

    def add_route(self, method: Method, path: str, handler: Handler) -> None:
        self._add(method, Route(path=path, handler=handler))

    def add_prefix_route(self, method: Method, prefix: str, handler: Handler) -> None:
        self._add(method, Route(path=prefix, handler=handler, prefix=True))

    def resolve(self, method: Method, path: str) -> tuple[Handler, str] | None:
        for route in self._routes[method]:
            suffix = route.match(path)
            if suffix is not None:
                return route.handler, suffix
        return None

    def _add(self, method: Method, route: Route) -> None:
        if not isinstance(method, Method):
            raise TypeError(f"method must be a Method, got {method!r}")
        if not route.path.startswith("/"):
            raise ValueError("path must start with '/'")
        self._routes[method].append(route)
