"""
Receipt summary tests.
"""

from services.receipt_view import COSTON2_EXPLORER, FLARE_EXPLORER, build_receipt_summary, explorer_base


def test_explorer_base():
    assert explorer_base("coston2") == COSTON2_EXPLORER
    assert explorer_base("Flare") == FLARE_EXPLORER
    assert explorer_base(None) == COSTON2_EXPLORER


def test_summary_prefers_tip_json():
    summary = build_receipt_summary(
        "r-1",
        {"id": "r-1", "status": "anchored", "flare_txid": "0xanchor", "created_at": "2026-02-10T10:00:00Z"},
        record={"amount": "99", "sender_wallet": "0xrecord"},
        tip_json={
            "tip_tx_hash": "0xpay",
            "chain": "coston2",
            "amount": "12.5",
            "currency": "USDT0",
            "sender_wallet": "0xpayer",
            "receiver_wallet": "0xpayee",
            "reference": "Invoice #1",
        },
        links={"receiptUrl": "http://proofrails.test/receipt/r-1"},
    )

    assert summary["receipt_id"] == "r-1"
    assert summary["title"] == "Invoice #1"
    assert summary["status"] == "anchored"
    assert summary["amount"] == "12.5"
    assert summary["payer"] == "0xpayer"
    assert summary["payee"] == "0xpayee"
    assert summary["timestamp"] == "2026-02-10T10:00:00Z"
    assert summary["network_label"] == "Flare Coston2"
    assert summary["payment_explorer_url"] == f"{COSTON2_EXPLORER}/tx/0xpay"
    assert summary["anchor_explorer_url"] == f"{COSTON2_EXPLORER}/tx/0xanchor"
    assert summary["proofrails_receipt_url"] == "http://proofrails.test/receipt/r-1"


def test_summary_falls_back_to_record():
    summary = build_receipt_summary(
        "r-2",
        {"status": "pending", "tx_hash": "0xfromreceipt"},
        record={"amount": "5", "currency": "C2FLR", "payer_address": "0xrecord"},
    )

    assert summary["receipt_id"] == "r-2"
    assert summary["title"] == "Payment"
    assert summary["amount"] == "5"
    assert summary["currency"] == "C2FLR"
    assert summary["payer"] == "0xrecord"
    assert summary["payee"] is None
    assert summary["tx_hash"] == "0xfromreceipt"
    assert summary["flare_txid"] is None
    assert summary["anchor_explorer_url"] is None
    assert summary["proofrails_receipt_url"] is None


def test_summary_of_non_dict_receipt():
    summary = build_receipt_summary("r-3", "not json")
    assert summary["receipt_id"] == "r-3"
    assert summary["status"] == "pending"
    assert summary["chain"] == "coston2"
    assert summary["timestamp"]
