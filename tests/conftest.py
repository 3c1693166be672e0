import pytest

from marketdb.api.client import ApiClient
from marketdb.api.routes import build_router
from marketdb.database import SCHEMA, get_seed_snapshot
from marketdb.store import Store


@pytest.fixture
def seeded_store():
    """A fresh store holding the bundled seed data."""
    store = Store(get_seed_snapshot())
    store.execute_script(SCHEMA)
    return store


@pytest.fixture
def client(seeded_store):
    return ApiClient(build_router(seeded_store))
