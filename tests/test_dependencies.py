"""
Dependency provider tests.
"""

import pytest

from dependencies import get_proofrails_client, get_proofrails_config, get_receipt_tracker


@pytest.fixture
def fresh_providers(monkeypatch):
    monkeypatch.setenv("PROOFRAILS_BASE_URL", "http://proofrails.local/")
    monkeypatch.setenv("PROOFRAILS_API_KEY", "env-key")
    providers = (get_proofrails_config, get_proofrails_client, get_receipt_tracker)
    for provider in providers:
        provider.cache_clear()
    yield
    for provider in providers:
        provider.cache_clear()


def test_client_is_shared_across_requests(fresh_providers):
    client = get_proofrails_client()

    assert get_proofrails_client() is client
    assert client.session is get_proofrails_client().session
    assert client.config is get_proofrails_config()
    assert client.base_url == "http://proofrails.local"


def test_tracker_is_shared_across_requests(fresh_providers):
    tracker = get_receipt_tracker()

    assert get_receipt_tracker() is tracker
    assert tracker.config.api_key == "env-key"
    assert tracker.status_url("r-1") == "http://proofrails.local/v1/iso/receipts/r-1"
