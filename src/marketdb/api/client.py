"""In-process API client that sends requests through a router."""

from __future__ import annotations

from typing import Any

from marketdb.api.router import Router
from marketdb.api.types import Request, Response


class ApiClient:
    """Thin facade over ``Router.dispatch``."""

    def __init__(self, router: Router) -> None:
        self.router = router

    async def request(self, method: str, path: str, body: Any = None, query: dict[str, Any] | None = None) -> Response:
        return await self.router.dispatch(Request(method=method, path=path, body=body, query=dict(query or {})))

    async def get(self, path: str, query: dict[str, Any] | None = None) -> Response:
        return await self.request("GET", path, query=query)

    async def post(self, path: str, body: Any = None) -> Response:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> Response:
        return await self.request("PUT", path, body=body)

    async def delete(self, path: str) -> Response:
        return await self.request("DELETE", path)
