"""Ordered routing table for method and path-pattern handlers."""

from collections.abc import Callable
from dataclasses import dataclass

from request import HTTPRequest
from response import HTTPResponse

Handler = Callable[[HTTPRequest], HTTPResponse]

ANY_METHOD = "*"


@dataclass(frozen=True, slots=True)
class Route:
    method: str
    pattern: str
    handler: Handler
    prefix: bool = False

    def matches_path(self, path: str) -> bool:
        if self.prefix:
            return path.startswith(self.pattern)
        return path == self.pattern

    def matches_method(self, method: str) -> bool:
        return self.method == ANY_METHOD or self.method == method


class Router:
    """Routes are tried in registration order; the first match wins."""

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        self._add(method, path, handler, prefix=False)

    def add_prefix_route(self, method: str, prefix: str, handler: Handler) -> None:
        self._add(method, prefix, handler, prefix=True)

    def resolve(self, method: str, path: str) -> Handler | None:
        normalized_method = method.upper().strip()
        for route in self._routes:
            if route.matches_path(path) and route.matches_method(normalized_method):
                return route.handler
        return None

    def allowed_methods(self, path: str) -> list[str]:
        """Methods registered for patterns matching ``path``, in registration order."""
        methods: list[str] = []
        for route in self._routes:
            if route.matches_path(path) and route.method not in methods:
                methods.append(route.method)
        return methods

    def _add(self, method: str, path: str, handler: Handler, *, prefix: bool) -> None:
        normalized_method = method.upper().strip()
        if not normalized_method:
            raise ValueError("method cannot be empty")
        if not path.startswith("/"):
            raise ValueError("path must start with '/'")
        self._routes.append(Route(normalized_method, path, handler, prefix))
