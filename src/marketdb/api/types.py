"""Request and response envelopes exchanged with route handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Request:
    """An inbound request. ``params`` and ``query`` are filled in by the router."""

    method: str
    path: str
    body: Any = None
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)


@dataclass
class Response:
    """A handler result: a status plus either data or an error message."""

    status: int
    data: Any = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.data is not None and self.error is not None:
            raise ValueError("A response carries data or an error, not both")

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


def ok(data: Any = None, status: int = 200) -> Response:
    return Response(status=status, data=data)


def created(data: Any) -> Response:
    return Response(status=201, data=data)


def error(status: int, message: str) -> Response:
    return Response(status=status, error=message)
