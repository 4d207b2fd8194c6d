"""
ProofRails proxy route tests.

Tests:
1. /create validates the tip and forwards it with the server-side key
2. /status passes through the middleware status code
3. /receipt/{id} combines receipt, record, links and summary
"""

import pytest

from config import ProofRailsConfig
from dependencies import get_proofrails_client
from fakes import BASE_URL, RECORD_TIP_URL, FakeResponse, FakeSession, receipt_url
from main import app
from services.proofrails_client import ProofRailsClient


TIP = {
    "tip": {
        "tx_hash": "0xabc",
        "chain": "coston2",
        "amount": "0.01",
        "currency": "C2FLR",
        "sender": "0xpayer",
        "receiver": "0xpayee",
        "reference": "ref-1",
    }
}


@pytest.fixture
def unconfigured(client):
    app.dependency_overrides[get_proofrails_client] = lambda: ProofRailsClient(
        ProofRailsConfig(), session=FakeSession()
    )
    return client


class TestCreate:

    def test_success(self, client, proofrails_session):
        receipt = {"receipt_id": "r-1", "status": "pending"}
        proofrails_session.routes[("POST", RECORD_TIP_URL)] = FakeResponse(200, receipt)

        resp = client.post("/api/proofrails/create", json=TIP)

        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert data["receipt"] == receipt
        assert data["middlewareUrl"] == RECORD_TIP_URL
        assert data["requestSent"]["tip_tx_hash"] == "0xabc"
        assert data["requestSent"]["sender_wallet"] == "0xpayer"

    def test_invalid_json(self, client):
        resp = client.post(
            "/api/proofrails/create",
            content="{not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid JSON body"

    def test_missing_fields(self, client, proofrails_session):
        resp = client.post("/api/proofrails/create", json={"tip": {"tx_hash": "0xabc"}})

        assert resp.status_code == 400
        data = resp.json()
        assert data["missing"] == [
            "chain", "amount", "currency", "sender_wallet", "receiver_wallet", "reference",
        ]
        assert data["received"] == {"tip": {"tx_hash": "0xabc"}}
        assert data["expectedShape"]["chain"] == "coston2"
        assert proofrails_session.calls == []

    def test_not_configured(self, unconfigured):
        resp = unconfigured.post("/api/proofrails/create", json=TIP)

        assert resp.status_code == 500
        assert resp.json()["error"] == "PROOFRAILS_BASE_URL missing"
        assert "hint" in resp.json()

    def test_middleware_failure(self, client, proofrails_session):
        proofrails_session.routes[("POST", RECORD_TIP_URL)] = FakeResponse(
            500, text="Internal Server Error", reason="Internal Server Error"
        )

        resp = client.post("/api/proofrails/create", json=TIP)

        assert resp.status_code == 502
        data = resp.json()
        assert data["error"] == "PROOFRAILS CREATE FAILED"
        assert data["httpStatus"] == 500
        assert data["rawResponseText"] == "Internal Server Error"
        assert data["rawResponseJson"] is None


class TestStatus:

    def test_passes_through_receipt(self, client, proofrails_session):
        body = {"receipt_id": "r-1", "status": "anchored"}
        proofrails_session.routes[("GET", receipt_url("r-1"))] = FakeResponse(200, body)

        resp = client.get("/api/proofrails/status", params={"receiptId": "r-1"})

        assert resp.status_code == 200
        assert resp.json() == body

    def test_missing_receipt_id(self, client):
        resp = client.get("/api/proofrails/status")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing receiptId"}

    def test_forwards_middleware_status(self, client, proofrails_session):
        proofrails_session.routes[("GET", receipt_url("r-1"))] = FakeResponse(401, {"detail": "bad key"})

        resp = client.get("/api/proofrails/status", params={"receiptId": "r-1"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "bad key", "raw": {"detail": "bad key"}}

    def test_not_configured(self, unconfigured):
        resp = unconfigured.get("/api/proofrails/status", params={"receiptId": "r-1"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Missing PROOFRAILS_BASE_URL"}


class TestReceipt:

    def test_receipt_with_summary(self, client, proofrails_session):
        receipt = {"id": "r-1", "status": "anchored", "flare_txid": "0xanchor", "bundle_url": "/files/r-1/bundle.zip"}
        tip_json = {
            "tip_tx_hash": "0xpay",
            "chain": "coston2",
            "amount": "0.01",
            "currency": "C2FLR",
            "sender_wallet": "0xpayer",
            "receiver_wallet": "0xpayee",
            "reference": "ref-1",
        }
        proofrails_session.routes.update({
            ("GET", receipt_url("r-1")): FakeResponse(200, receipt),
            ("GET", f"{BASE_URL}/files/r-1/tip.json"): FakeResponse(200, tip_json),
        })

        resp = client.get("/api/proofrails/receipt/r-1")

        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert data["baseUrl"] == BASE_URL
        assert data["record"] is None
        assert data["links"]["bundle_url"] == f"{BASE_URL}/files/r-1/bundle.zip"
        summary = data["summary"]
        assert summary["status"] == "anchored"
        assert summary["payer"] == "0xpayer"
        assert summary["tx_hash"] == "0xpay"
        assert summary["title"] == "ref-1"
        assert summary["proofrails_receipt_url"] == f"{BASE_URL}/receipt/r-1"

    def test_receipt_not_found(self, client):
        resp = client.get("/api/proofrails/receipt/r-404")

        assert resp.status_code == 502
        data = resp.json()
        assert data["receiptId"] == "r-404"
        assert data["httpStatus"] == 404
