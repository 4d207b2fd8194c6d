# services/proof_service.py
"""
Proof Service - shareable payment proofs and their ProofRails receipts.

When a payment is confirmed:
1. A proof with a random public slug is stored next to the payment
2. A ProofRails receipt is requested for it (best effort)
3. The receipt id/status are stored on the proof, and anchoring is tracked
   in the background

Steps 2 and 3 never undo step 1: the value transfer is already final, so a
ProofRails failure only leaves the receipt pending, with a diagnostic.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from database import get_session_context
from models import Payment, Proof
from services.proofrails_client import (
     ProofRailsClient,
     ProofRailsError,
     ProofRailsRequestFailed,
     build_diagnostic,
)
from services.receipt_tracker import (
     MissingIdentifier,
     ReceiptStatusTracker,
     ReceiptTimeout,
     TERMINAL_STATUS,
     extract_identifier,
     extract_status,
)

logger = logging.getLogger(__name__)

RECORD_TYPE_TIP = "tip"
DEFAULT_RECEIPT_STATUS = "pending"


def new_public_slug() -> str:
     return f"proof_{uuid.uuid4()}"


@dataclass
class ReceiptOutcome:
     """Result of asking ProofRails for a receipt."""
     receipt_id: Optional[str] = None
     status: Optional[str] = None
     diagnostic: Optional[dict] = None
     response: Any = None

     @property
     def ok(self) -> bool:
          return self.receipt_id is not None


def create_proof(db: Session, payment: Payment) -> Proof:
     proof = Proof(
          payment_id=payment.id,
          public_slug=new_public_slug(),
          anchored_on_flare=False,
     )
     db.add(proof)
     db.flush()
     return proof


def get_proof_by_slug(db: Session, slug: str) -> Optional[Proof]:
     return db.query(Proof).filter(Proof.public_slug == slug).first()


def tip_for_payment(payment: Payment, chain: str, reference: str) -> dict:
     """Tip payload describing a payment, in the middleware's flat shape."""
     return {
          "tip_tx_hash": payment.tx_hash,
          "chain": chain,
          "amount": format(payment.amount.normalize(), "f") if payment.amount is not None else "",
          "currency": payment.token_symbol,
          "sender_wallet": payment.payer_address,
          "receiver_wallet": payment.payee_address,
          "reference": reference,
     }


def request_receipt(client: ProofRailsClient, tip: dict) -> ReceiptOutcome:
     """
     Create a ProofRails receipt, absorbing every failure into a diagnostic.

     Returns:
          ReceiptOutcome with receipt_id set on success, diagnostic otherwise
     """
     try:
          response = client.record_tip(tip)
     except ProofRailsRequestFailed as e:
          raw = e.raw_json if e.raw_json is not None else e.raw_text
          return ReceiptOutcome(
               diagnostic=build_diagnostic(
                    f"PROOFRAILS CREATE FAILED\nHTTP {e.status_code} {e.status_text}".strip(),
                    raw,
                    e.detail,
               ),
          )
     except ProofRailsError as e:
          return ReceiptOutcome(diagnostic=build_diagnostic("PROOFRAILS ERROR", e.to_dict(), str(e)))

     try:
          receipt_id = require_identifier(response)
     except MissingIdentifier as e:
          logger.error("ProofRails response had no receipt id: %r", response)
          return ReceiptOutcome(response=response, diagnostic=build_diagnostic(str(e), e.raw))

     status = extract_status(response) or DEFAULT_RECEIPT_STATUS
     return ReceiptOutcome(receipt_id=receipt_id, status=status, response=response)


def require_identifier(response: Any) -> str:
     receipt_id = extract_identifier(response)
     if receipt_id is None:
          raise MissingIdentifier(response)
     return receipt_id


def _set_status(proof: Proof, status: str) -> None:
     # Stored lower-case whichever path wrote it
     proof.proofrails_status = status.lower()


def attach_receipt(
     db: Session,
     proof: Proof,
     receipt_id: str,
     status: str,
     record_type: str = RECORD_TYPE_TIP,
) -> Proof:
     proof.proofrails_record_type = record_type
     proof.proofrails_receipt_id = receipt_id
     _set_status(proof, status)
     db.flush()
     return proof


def mark_anchored_on_flare(db: Session, proof: Proof, anchor_tx_hash: str) -> Proof:
     """
     Record a confirmed on-chain anchor transaction for the proof.

     Raises:
          ValueError: If the proof is already anchored
     """
     if proof.anchored_on_flare:
          raise ValueError("This proof is already anchored on Flare")
     proof.anchored_on_flare = True
     proof.flare_anchor_ref = anchor_tx_hash
     db.flush()
     return proof


def refresh_receipt_status(db: Session, client: ProofRailsClient, proof: Proof) -> Any:
     """
     Re-read the receipt status once and store it on the proof.

     Returns the raw receipt. ProofRails errors propagate to the caller.
     """
     if not proof.proofrails_receipt_id:
          raise ValueError("Proof has no ProofRails receipt yet")
     receipt = client.get_receipt(proof.proofrails_receipt_id)
     status = extract_status(receipt)
     if status:
          _set_status(proof, status)
          db.flush()
     return receipt


def track_anchoring(tracker: ReceiptStatusTracker, proof_id: str, receipt_id: str) -> Optional[str]:
     """
     Background task: wait for anchoring, then store the final status.

     Timeouts are expected (anchoring can take minutes) and only logged; the
     proof keeps its pending status until someone refreshes it.
     """
     try:
          tracker.await_anchored(receipt_id)
     except ReceiptTimeout as e:
          logger.warning("Proof %s: %s", proof_id, e)
          return None

     with get_session_context() as db:
          proof = db.query(Proof).filter(Proof.id == proof_id).first()
          if proof is None:
               logger.warning("Proof %s disappeared before anchoring finished", proof_id)
               return None
          proof.proofrails_status = TERMINAL_STATUS
     logger.info("Proof %s receipt %s anchored", proof_id, receipt_id)
     return TERMINAL_STATUS
