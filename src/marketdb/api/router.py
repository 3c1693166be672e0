"""Regex-based request router.

Path templates such as ``/orders/:id/status`` compile into a pattern with one
capture group per ``:name`` segment. Dispatch picks the first registered route
whose method and pattern both match, fills in path and query parameters, and
turns any exception escaping a handler into a 500 response.
"""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass, replace
from typing import Awaitable, Callable
from urllib.parse import unquote

from marketdb.api.types import Request, Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request], "Response | Awaitable[Response]"]

_PARAM_SEGMENT = re.compile(r":([a-zA-Z0-9_]+)")

NOT_FOUND_MESSAGE = "Endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def compile_template(template: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a path template into a pattern and its parameter names.

    Each ``:name`` becomes a group matching one path segment (no ``/``).
    Everything else matches literally.
    """
    keys: list[str] = []
    parts: list[str] = []
    pos = 0
    for match in _PARAM_SEGMENT.finditer(template):
        parts.append(re.escape(template[pos:match.start()]))
        parts.append("([^/]+)")
        keys.append(match.group(1))
        pos = match.end()
    parts.append(re.escape(template[pos:]))
    return re.compile("".join(parts)), tuple(keys)


def parse_query_string(query_string: str) -> dict[str, str]:
    """Parse ``a=1&b=two`` into a dict, percent-decoding keys and values.

    A pair without ``=`` maps to an empty string; later keys overwrite
    earlier ones.
    """
    result: dict[str, str] = {}
    for pair in query_string.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        result[unquote(key)] = unquote(value)
    return result


@dataclass(frozen=True)
class Route:
    """A registered route."""

    method: str
    template: str
    pattern: re.Pattern[str]
    keys: tuple[str, ...]
    handler: Handler

    def match(self, path: str) -> dict[str, str] | None:
        """Return the captured parameters if the whole path matches."""
        m = self.pattern.fullmatch(path)
        if m is None:
            return None
        return dict(zip(self.keys, m.groups()))


class Router:
    """Ordered route table plus dispatch."""

    def __init__(self) -> None:
        self._routes: list[Route] = []

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def add_route(self, method: str, template: str, handler: Handler) -> Route:
        """Register a handler. Earlier registrations win on overlap.

        The method is stored upper-cased and dispatch upper-cases the request
        method, so methods match without regard to case.
        """
        pattern, keys = compile_template(template)
        route = Route(method=method.upper(), template=template, pattern=pattern, keys=keys, handler=handler)
        self._routes.append(route)
        return route

    def get(self, template: str, handler: Handler) -> Route:
        return self.add_route("GET", template, handler)

    def post(self, template: str, handler: Handler) -> Route:
        return self.add_route("POST", template, handler)

    def put(self, template: str, handler: Handler) -> Route:
        return self.add_route("PUT", template, handler)

    def delete(self, template: str, handler: Handler) -> Route:
        return self.add_route("DELETE", template, handler)

    def resolve(self, method: str, path: str) -> tuple[Route, dict[str, str]] | None:
        """Find the first route matching ``method`` and ``path`` (no query string)."""
        method = method.upper()
        for route in self._routes:
            if route.method != method:
                continue
            params = route.match(path)
            if params is not None:
                return route, params
        return None

    async def dispatch(self, request: Request) -> Response:
        """Route a request to its handler and return the handler's response."""
        clean_path, _, query_string = request.path.partition("?")
        method = request.method.upper()
        logger.debug("%s %s", method, clean_path)

        resolved = self.resolve(method, clean_path)
        if resolved is None:
            logger.warning("404 Not Found: %s %s", method, clean_path)
            return Response(status=404, error=NOT_FOUND_MESSAGE)
        route, params = resolved

        query = dict(request.query or {})
        if query_string:
            query.update(parse_query_string(query_string))

        routed = replace(
            request,
            method=method,
            path=clean_path,
            params={**(request.params or {}), **params},
            query=query,
        )

        try:
            result = route.handler(routed)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception("500 Internal Server Error: %s %s", method, clean_path)
            return Response(status=500, error=INTERNAL_ERROR_MESSAGE)

        if not isinstance(result, Response):
            logger.error("Handler for %s %s returned %s, not a Response", method, route.template, type(result).__name__)
            return Response(status=500, error=INTERNAL_ERROR_MESSAGE)
        return result
