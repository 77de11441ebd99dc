"""
Shared test fixtures.

Every test gets its own SQLite database file under tmp_path,
so tests never touch a real database and never see each
other's data. A file (not :memory:) is used so that several
threads can open their own connections in the concurrency
tests.
"""

import pytest
from fastapi.testclient import TestClient

from banking_ledger.config import Settings
from banking_ledger.main import create_app
from banking_ledger.store import BalanceStore
from banking_ledger.services.ledger_engine import LedgerEngine


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'ledger.db'}",
        AUTO_CREATE_SCHEMA=True,
        SQLITE_BUSY_TIMEOUT=30.0,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def store(settings):
    """A balance store with a fresh schema."""
    store = BalanceStore.from_settings(settings)
    store.create_schema()
    yield store
    store.dispose()


@pytest.fixture
def ledger(store):
    """The ledger engine under test."""
    return LedgerEngine(store)


@pytest.fixture
def client(settings):
    """
    Provide a test client backed by its own database.

    The app builds its store from the test settings, so no
    dependency overrides are needed.
    """
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client

