# schemas/payment.py
"""
Pydantic schemas for the post-payment flow.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from config import FLARE_TESTNET_CHAIN_ID


class PaymentConfirmRequest(BaseModel):
     """Request body for POST /api/invoices/{invoice_id}/payments."""

     payer_address: str = Field(..., min_length=1, max_length=64, description="Wallet that sent the funds")
     tx_hash: str = Field(..., min_length=1, max_length=80, description="Confirmed transaction hash")
     amount: Decimal = Field(..., gt=0, description="Amount actually paid")
     token_symbol: str = Field(..., min_length=1, max_length=16, description="C2FLR or USDT0")
     chain_id: int = Field(default=FLARE_TESTNET_CHAIN_ID, description="EVM chain id")

     @field_validator("payer_address", "tx_hash", "token_symbol")
     @classmethod
     def not_blank(cls, v: str) -> str:
          if not v.strip():
               raise ValueError("must not be blank")
          return v.strip()

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "payer_address": "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
                    "tx_hash": "0x9fc76417374aa880d4449a1f7f31ec597f00b1f6f3dd2d66f4c9c6c445836d8b",
                    "amount": 12.5,
                    "token_symbol": "USDT0",
                    "chain_id": 114,
               }
          }
     )


class PaymentResponse(BaseModel):
     id: str
     invoice_id: str
     payer_address: str
     payee_address: str
     chain_id: int
     tx_hash: str
     amount: Decimal
     token_symbol: str
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class ProofRailsResult(BaseModel):
     """Receipt part of the post-pay flow; never fails the payment."""
     receipt_id: Optional[str] = None
     status: Optional[str] = None
     diagnostic: Optional[dict[str, Any]] = None


class PaymentConfirmResponse(BaseModel):
     """Response for POST /api/invoices/{invoice_id}/payments."""

     payment: PaymentResponse
     invoice_status: str = "paid"
     proof_slug: str
     proof_url: str
     step: str = Field(..., description="ready, or anchoring while the receipt is tracked")
     proofrails: ProofRailsResult
     message: str
