# routers/proofs.py
"""
Public proof routes, addressed by slug.

GET  /api/proofs/{slug}              proof + payment
POST /api/proofs/{slug}/proofrails   create the ProofRails receipt if missing
POST /api/proofs/{slug}/refresh      re-check receipt status once
POST /api/proofs/{slug}/anchor       record a confirmed on-chain anchor
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config import ProofRailsConfig
from database import get_session
from dependencies import get_proofrails_client, get_proofrails_config
from models import Proof
from schemas.payment import PaymentResponse
from schemas.proof import (
     AnchorRequest,
     ProofDetailResponse,
     ProofRailsActionResponse,
     ProofResponse,
)
from services.proof_service import (
     attach_receipt,
     get_proof_by_slug,
     mark_anchored_on_flare,
     refresh_receipt_status,
     request_receipt,
     tip_for_payment,
)
from services.proofrails_client import ProofRailsClient, ProofRailsError, build_diagnostic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proofs", tags=["proofs"])


def _get_proof_or_404(db: Session, slug: str) -> Proof:
     proof = get_proof_by_slug(db, slug)
     if not proof:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Proof {slug} not found",
          )
     if proof.payment is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Payment for proof {slug} not found",
          )
     return proof


@router.get("/{slug}", response_model=ProofDetailResponse, summary="Get proof by slug")
def get_proof(slug: str, db: Session = Depends(get_session)):
     proof = _get_proof_or_404(db, slug)
     return ProofDetailResponse(
          proof=ProofResponse.model_validate(proof),
          payment=PaymentResponse.model_validate(proof.payment),
     )


@router.post(
     "/{slug}/proofrails",
     response_model=ProofRailsActionResponse,
     summary="Create ProofRails receipt for a proof",
)
def create_proof_receipt(
     slug: str,
     db: Session = Depends(get_session),
     client: ProofRailsClient = Depends(get_proofrails_client),
     config: ProofRailsConfig = Depends(get_proofrails_config),
):
     """
     Create the receipt for a proof whose receipt step failed earlier.

     The proof id is the reference, so retries describe the same proof.
     """
     proof = _get_proof_or_404(db, slug)
     if proof.has_receipt:
          return ProofRailsActionResponse(
               ok=True,
               message="ProofRails receipt already exists",
               proof=ProofResponse.model_validate(proof),
               receipt_id=proof.proofrails_receipt_id,
               status=proof.proofrails_status,
          )

     outcome = request_receipt(client, tip_for_payment(proof.payment, config.chain, proof.id))
     if not outcome.ok:
          return JSONResponse(
               status_code=status.HTTP_502_BAD_GATEWAY,
               content={"ok": False, **outcome.diagnostic},
          )

     attach_receipt(db, proof, outcome.receipt_id, outcome.status)
     db.commit()
     db.refresh(proof)
     return ProofRailsActionResponse(
          ok=True,
          message=f"ProofRails receipt created!\nReceipt ID: {outcome.receipt_id}\nStatus: {outcome.status}",
          proof=ProofResponse.model_validate(proof),
          receipt_id=outcome.receipt_id,
          status=outcome.status,
          response=outcome.response,
     )


@router.post(
     "/{slug}/refresh",
     response_model=ProofRailsActionResponse,
     summary="Re-check ProofRails receipt status",
)
def refresh_proof_receipt(
     slug: str,
     db: Session = Depends(get_session),
     client: ProofRailsClient = Depends(get_proofrails_client),
):
     proof = _get_proof_or_404(db, slug)
     if not proof.has_receipt:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="Proof has no ProofRails receipt yet",
          )

     try:
          receipt = refresh_receipt_status(db, client, proof)
     except ProofRailsError as e:
          logger.error("Status refresh failed for proof %s: %s", slug, e)
          return JSONResponse(
               status_code=status.HTTP_502_BAD_GATEWAY,
               content={"ok": False, **build_diagnostic("PROOFRAILS STATUS FAILED", e.to_dict(), str(e))},
          )

     db.commit()
     db.refresh(proof)
     return ProofRailsActionResponse(
          ok=True,
          message=f"Status: {proof.proofrails_status or 'unknown'}",
          proof=ProofResponse.model_validate(proof),
          receipt_id=proof.proofrails_receipt_id,
          status=proof.proofrails_status,
          response=receipt,
     )


@router.post("/{slug}/anchor", response_model=ProofResponse, summary="Record on-chain anchor")
def anchor_proof(slug: str, body: AnchorRequest, db: Session = Depends(get_session)):
     proof = _get_proof_or_404(db, slug)
     try:
          mark_anchored_on_flare(db, proof, body.anchor_tx_hash.strip())
     except ValueError as e:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
     db.commit()
     db.refresh(proof)
     return ProofResponse.model_validate(proof)
