# schemas/invoice.py
"""
Pydantic schemas for Invoice API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator
from enum import Enum

from config import DEFAULT_TOKEN_SYMBOL


class InvoiceStatusEnum(str, Enum):
     """Invoice payment status options."""
     OPEN = "open"
     PAID = "paid"


class InvoiceCreate(BaseModel):
     """Schema for creating a new payment request."""
     creator_address: str = Field(..., min_length=1, max_length=64, description="Payee wallet address")
     amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=6, description="Requested amount")
     memo: Optional[str] = Field(None, max_length=500, description="Note shown to the payer")
     token_symbol: str = Field(default=DEFAULT_TOKEN_SYMBOL, min_length=1, max_length=16)

     @field_validator("creator_address")
     @classmethod
     def address_not_blank(cls, v: str) -> str:
          if not v.strip():
               raise ValueError("Please enter your wallet address.")
          return v.strip()

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "creator_address": "0x8ba1f109551bD432803012645Ac136ddd64DBA72",
                    "amount": 12.5,
                    "memo": "Logo design",
                    "token_symbol": "USDT0"
               }
          }
     )


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: str
     creator_address: str
     amount: Decimal
     token_symbol: str
     memo: Optional[str] = None
     status: InvoiceStatusEnum
     created_at: datetime
     payment_link: str

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "5b0c3f0e-8d8e-4a43-9c8f-3f0c1c1d2a11",
                    "creator_address": "0x8ba1f109551bD432803012645Ac136ddd64DBA72",
                    "amount": 12.5,
                    "token_symbol": "USDT0",
                    "memo": "Logo design",
                    "status": "open",
                    "created_at": "2026-01-31T10:30:00",
                    "payment_link": "/pay/5b0c3f0e-8d8e-4a43-9c8f-3f0c1c1d2a11"
               }
          }
     )


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     page_size: int = 50
