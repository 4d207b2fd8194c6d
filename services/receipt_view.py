# services/receipt_view.py
"""
Normalized receipt summary built from the ProofRails artifacts.

Payer, amount and tx hash live in different documents depending on the
middleware version (tip.json, receipt.json, the message record or the
receipt itself), so each field takes the first non-empty value.
"""
from datetime import datetime, timezone
from typing import Any, Optional

COSTON2_EXPLORER = "https://coston2-explorer.flare.network"
FLARE_EXPLORER = "https://flare-explorer.flare.network"


def explorer_base(chain: Optional[str]) -> str:
     c = (chain or "").lower()
     if "coston2" in c:
          return COSTON2_EXPLORER
     if "flare" in c or "mainnet" in c:
          return FLARE_EXPLORER
     return COSTON2_EXPLORER


def pick_string(*values: Any) -> str:
     for value in values:
          if value is None:
               continue
          s = str(value).strip()
          if s:
               return s
     return ""


def _field(sources: list, *names: str) -> list:
     """Values of each name across sources, name-major order."""
     return [src.get(name) for name in names for src in sources]


def build_receipt_summary(
     receipt_id: str,
     receipt: Any,
     record: Any = None,
     tip_json: Any = None,
     receipt_json: Any = None,
     links: Optional[dict] = None,
) -> dict:
     receipt = receipt if isinstance(receipt, dict) else {}
     record = record if isinstance(record, dict) else {}
     tip_json = tip_json if isinstance(tip_json, dict) else {}
     receipt_json = receipt_json if isinstance(receipt_json, dict) else {}
     links = links or {}
     files = [tip_json, receipt_json]

     chain = pick_string(
          tip_json.get("chain"), receipt_json.get("chain"),
          record.get("chain"), receipt.get("chain"), "coston2",
     )
     explorer = explorer_base(chain)

     tx_hash = pick_string(
          *_field(files, "tip_tx_hash", "tx_hash"),
          record.get("tip_tx_hash"), record.get("tx_hash"),
          receipt.get("tip_tx_hash"), receipt.get("tx_hash"),
     )
     payer = pick_string(
          *_field(files, "sender_wallet", "sender", "from"),
          record.get("sender_wallet"), record.get("payer_address"),
     )
     payee = pick_string(
          *_field(files, "receiver_wallet", "receiver", "to"),
          record.get("receiver_wallet"), record.get("payee_address"),
     )
     amount = pick_string(tip_json.get("amount"), receipt_json.get("amount"), record.get("amount"))
     currency = pick_string(tip_json.get("currency"), receipt_json.get("currency"), record.get("currency"))
     title = pick_string(
          tip_json.get("reference"), receipt_json.get("reference"),
          receipt.get("reference"), record.get("reference"), "Payment",
     )
     created_at = pick_string(
          receipt.get("created_at"), receipt_json.get("created_at"), tip_json.get("created_at"),
          receipt.get("anchored_at"), receipt_json.get("anchored_at"),
          datetime.now(timezone.utc).isoformat(),
     )
     flare_txid = receipt.get("flare_txid") or receipt_json.get("flare_txid")

     return {
          "receipt_id": pick_string(receipt.get("id"), receipt_id),
          "title": title,
          "type_label": "RECEIPT",
          "timestamp": created_at,
          "status": pick_string(receipt.get("status"), receipt_json.get("status"), "pending"),
          "amount": amount or None,
          "currency": currency or None,
          "payer": payer or None,
          "payee": payee or None,
          "tx_hash": tx_hash or None,
          "chain": chain,
          "network_label": "Flare Coston2" if "coston2" in chain.lower() else "Flare",
          "bundle_hash": receipt.get("bundle_hash") or receipt_json.get("bundle_hash"),
          "flare_txid": flare_txid,
          "payment_explorer_url": f"{explorer}/tx/{tx_hash}" if tx_hash else None,
          "anchor_explorer_url": f"{explorer}/tx/{flare_txid}" if flare_txid else None,
          "proofrails_receipt_url": links.get("receiptUrl"),
     }
