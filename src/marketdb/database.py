"""Process-wide store accessor and the seed snapshot it is built from."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from marketdb.api.models import RECORD_TYPES
from marketdb.config import Settings, get_settings
from marketdb.store import Store
from marketdb.table import Row

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).parent / "seed" / "market.json"

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (uid TEXT PRIMARY KEY, email TEXT, displayName TEXT, userType TEXT, password TEXT, createdAt TEXT, updatedAt TEXT);
CREATE TABLE IF NOT EXISTS foods (id TEXT PRIMARY KEY, name TEXT, description TEXT, price REAL, cookName TEXT, cookId TEXT, category TEXT, imageUrl TEXT, ingredients TEXT, preparationTime INTEGER, servingSize INTEGER, isAvailable INTEGER, rating REAL, reviewCount INTEGER, createdAt TEXT, updatedAt TEXT);
CREATE TABLE IF NOT EXISTS orders (id TEXT PRIMARY KEY, foodId TEXT, buyerId TEXT, sellerId TEXT, quantity INTEGER, totalPrice REAL, status TEXT, deliveryAddress TEXT, orderDate TEXT, estimatedDeliveryTime TEXT);
CREATE TABLE IF NOT EXISTS chats (id TEXT PRIMARY KEY, buyerId TEXT, buyerName TEXT, sellerId TEXT, sellerName TEXT, orderId TEXT, foodId TEXT, foodName TEXT, lastMessage TEXT, lastMessageTime TEXT, lastMessageSender TEXT, buyerUnreadCount INTEGER, sellerUnreadCount INTEGER, isActive INTEGER, createdAt TEXT);
CREATE TABLE IF NOT EXISTS messages (id TEXT PRIMARY KEY, chatId TEXT, senderId TEXT, senderName TEXT, senderType TEXT, message TEXT, messageType TEXT, timestamp TEXT, isRead INTEGER, orderData TEXT);
CREATE TABLE IF NOT EXISTS reviews (id TEXT PRIMARY KEY, foodId TEXT, foodName TEXT, buyerId TEXT, buyerName TEXT, buyerAvatar TEXT, sellerId TEXT, sellerName TEXT, orderId TEXT, rating REAL, comment TEXT, images TEXT, helpfulCount INTEGER, reportCount INTEGER, isVerifiedPurchase INTEGER, createdAt TEXT, updatedAt TEXT);
"""

_store: Store | None = None
_store_lock = threading.Lock()


def load_seed(path: Path | None = None) -> dict[str, list[dict[str, Any]]]:
    """Read a seed file: a JSON object mapping table name to a list of records."""
    seed_path = path or SEED_FILE
    with open(seed_path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Seed file {seed_path} must hold a JSON object of tables")
    return data


def get_seed_snapshot(path: Path | None = None) -> dict[str, list[Row]]:
    """Load the seed and encode each record the way its model stores it.

    Tables without a known record type are copied as-is.
    """
    snapshot: dict[str, list[Row]] = {}
    for table, records in load_seed(path).items():
        record_type = RECORD_TYPES.get(table)
        if record_type is None:
            snapshot[table] = [dict(record) for record in records]
        else:
            snapshot[table] = [record_type.from_payload(record).to_row() for record in records]
    return snapshot


def build_tables(settings: Settings | None = None) -> dict[str, list[Row]]:
    """Build the initial tables: the seed snapshot, or nothing if seeding is off."""
    settings = settings or get_settings()
    if not settings.seed_enabled:
        return {}
    return get_seed_snapshot(settings.seed_path)


def _initialize(settings: Settings) -> Store:
    """Create or reset the store. The caller holds ``_store_lock``."""
    global _store
    tables = build_tables(settings)
    if _store is None:
        _store = Store(tables, orderings=settings.orderings())
    else:
        _store.reset(tables)
        _store.orderings = settings.orderings()
    _store.execute_script(SCHEMA)
    logger.info("Database initialized with tables: %s", ", ".join(_store.table_names()))
    return _store


def init_database(settings: Settings | None = None) -> Store:
    """Create the process-wide store, or reset it to a fresh seed.

    Every mutation made since the previous initialization is discarded, and
    the store takes the ORDER BY settings passed in.
    """
    settings = settings or get_settings()
    with _store_lock:
        return _initialize(settings)


def get_store() -> Store:
    """Return the process-wide store, initializing it on first use."""
    store = _store
    if store is not None:
        return store
    with _store_lock:
        if _store is not None:
            return _store
        return _initialize(get_settings())
