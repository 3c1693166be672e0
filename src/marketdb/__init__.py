"""marketdb - An in-memory table store and request router for a marketplace API."""

from marketdb.api import ApiClient, Request, Response, Router, build_router
from marketdb.database import get_store, init_database
from marketdb.errors import ApiError, MarketError, NotFoundError, ParameterCountError, ValidationError
from marketdb.parsing import StatementParser
from marketdb.store import MutationResult, Store
from marketdb.table import Table

__all__ = [
    # Store
    "Store",
    "Table",
    "MutationResult",
    "StatementParser",
    "get_store",
    "init_database",
    # API
    "ApiClient",
    "Request",
    "Response",
    "Router",
    "build_router",
    # Errors
    "MarketError",
    "ApiError",
    "NotFoundError",
    "ParameterCountError",
    "ValidationError",
]

__version__ = "0.1.0"
