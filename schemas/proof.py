# schemas/proof.py
"""
Pydantic schemas for proof pages.
"""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict

from .payment import PaymentResponse


class ProofResponse(BaseModel):
     id: str
     public_slug: str
     payment_id: str
     anchored_on_flare: bool
     flare_anchor_ref: Optional[str] = None
     proofrails_record_type: Optional[str] = None
     proofrails_receipt_id: Optional[str] = None
     proofrails_status: Optional[str] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class ProofDetailResponse(BaseModel):
     proof: ProofResponse
     payment: PaymentResponse


class AnchorRequest(BaseModel):
     """Confirmed anchor transaction sent from the proof page."""
     anchor_tx_hash: str = Field(..., min_length=1, max_length=80)


class ProofRailsActionResponse(BaseModel):
     ok: bool
     message: str
     proof: ProofResponse
     receipt_id: Optional[str] = None
     status: Optional[str] = None
     response: Any = None
