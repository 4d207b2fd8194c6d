"""
Pytest configuration and shared fixtures for the ProofPay backend tests.

This conftest.py:
1. Points the app at an in-memory SQLite database before anything imports it
2. Adds project root and tests root to sys.path for imports
3. Provides a TestClient wired to fake ProofRails collaborators
"""

import os
import sys
from pathlib import Path

# Must happen before database.py is imported
os.environ["DATABASE_URL"] = "sqlite://"

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import pytest
from fastapi.testclient import TestClient

from config import ProofRailsConfig
from database import engine
from dependencies import get_proofrails_client, get_proofrails_config, get_receipt_tracker
from fakes import BASE_URL, PAYEE, FakeClock, FakeSession, ScriptedFetch
from main import app
from models import Base
from services.proofrails_client import ProofRailsClient
from services.receipt_tracker import ReceiptStatusTracker


# =============================================================================
# Database
# =============================================================================

@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# ProofRails doubles
# =============================================================================

@pytest.fixture
def proofrails_config():
    return ProofRailsConfig(
        base_url=BASE_URL + "/",
        api_key="test-key",
        poll_interval_ms=2000,
        timeout_ms=10_000,
    )


@pytest.fixture
def proofrails_session():
    return FakeSession()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker_fetch():
    return ScriptedFetch({"status": "anchored"})


@pytest.fixture
def client(proofrails_config, proofrails_session, clock, tracker_fetch):
    app.dependency_overrides[get_proofrails_config] = lambda: proofrails_config
    app.dependency_overrides[get_proofrails_client] = lambda: ProofRailsClient(
        proofrails_config, session=proofrails_session
    )
    app.dependency_overrides[get_receipt_tracker] = lambda: ReceiptStatusTracker(
        proofrails_config, fetch=tracker_fetch, sleep=clock.sleep, clock=clock
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_invoice(client):
    def _make(amount="12.5", creator_address=PAYEE, **extra):
        resp = client.post(
            "/api/invoices",
            json={"creator_address": creator_address, "amount": amount, **extra},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make

