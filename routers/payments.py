# routers/payments.py
"""
Payment confirmation API.

POST /api/invoices/{invoice_id}/payments: called once the wallet reports the
transfer confirmed. Saves the payment, marks the invoice paid and creates the
shareable proof; then asks ProofRails for a receipt and tracks anchoring in
the background. ProofRails problems are reported, never fatal.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from config import ProofRailsConfig
from database import get_session
from dependencies import get_proofrails_client, get_proofrails_config, get_receipt_tracker
from schemas.payment import (
     PaymentConfirmRequest,
     PaymentConfirmResponse,
     PaymentResponse,
     ProofRailsResult,
)
from services.invoice_service import (
     InvoiceService,
     InvoiceAlreadyPaid,
     InvalidPayeeAddress,
     DuplicatePayment,
)
from services.proof_service import (
     attach_receipt,
     create_proof,
     request_receipt,
     tip_for_payment,
     track_anchoring,
)
from services.proofrails_client import ProofRailsClient
from services.receipt_tracker import ReceiptStatusTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["payments"])


@router.post(
     "/{invoice_id}/payments",
     response_model=PaymentConfirmResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Confirm payment",
)
def confirm_payment(
     invoice_id: str,
     body: PaymentConfirmRequest,
     background_tasks: BackgroundTasks,
     db: Session = Depends(get_session),
     client: ProofRailsClient = Depends(get_proofrails_client),
     tracker: ReceiptStatusTracker = Depends(get_receipt_tracker),
     config: ProofRailsConfig = Depends(get_proofrails_config),
):
     """
     Record a confirmed payment.

     1. Validates the invoice exists, is open and has a 0x payee.
     2. Saves the payment, marks the invoice paid, creates the proof.
     3. Creates a ProofRails receipt (best effort).
     4. Schedules anchoring tracking when a receipt id came back.
     """
     invoice = InvoiceService.get_invoice(db, invoice_id)
     if not invoice:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Invoice with ID {invoice_id} not found",
          )

     try:
          payment = InvoiceService.record_payment(
               db,
               invoice,
               payer_address=body.payer_address,
               tx_hash=body.tx_hash,
               amount=body.amount,
               token_symbol=body.token_symbol,
               chain_id=body.chain_id,
          )
     except (InvoiceAlreadyPaid, InvalidPayeeAddress) as e:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
     except DuplicatePayment as e:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

     proof = create_proof(db, payment)
     db.commit()
     logger.info("Invoice %s paid by tx %s, proof %s", invoice.id, payment.tx_hash, proof.public_slug)

     outcome = request_receipt(client, tip_for_payment(payment, config.chain, invoice.id))
     step = "ready"
     if outcome.ok:
          attach_receipt(db, proof, outcome.receipt_id, outcome.status)
          db.commit()
          if outcome.status.lower() != "anchored":
               step = "anchoring"
               background_tasks.add_task(track_anchoring, tracker, proof.id, outcome.receipt_id)

     lines = [
          "Payment confirmed + saved!",
          f"Tx:\n{payment.tx_hash}",
          f"Shareable proof link:\n/proof/{proof.public_slug}",
     ]
     if outcome.receipt_id:
          lines.append(f"ProofRails receipt:\n{outcome.receipt_id}")

     db.refresh(payment)
     return PaymentConfirmResponse(
          payment=PaymentResponse.model_validate(payment),
          invoice_status=invoice.status.value,
          proof_slug=proof.public_slug,
          proof_url=f"/proof/{proof.public_slug}",
          step=step,
          proofrails=ProofRailsResult(
               receipt_id=outcome.receipt_id,
               status=outcome.status,
               diagnostic=outcome.diagnostic,
          ),
          message="\n".join(lines),
     )
