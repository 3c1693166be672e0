"""In-process marketplace API: router, envelopes, models and controllers."""

from marketdb.api.client import ApiClient
from marketdb.api.router import Route, Router, compile_template, parse_query_string
from marketdb.api.routes import build_router
from marketdb.api.types import Request, Response

__all__ = [
    "ApiClient",
    "Request",
    "Response",
    "Route",
    "Router",
    "build_router",
    "compile_template",
    "parse_query_string",
]
