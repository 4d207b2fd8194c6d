# routers/invoices.py
"""
Invoice API routes.

Anyone can create a payment request for their own wallet; the returned id
is the public payment link (/pay/<id>).
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Invoice
from models.invoice import InvoiceStatus
from services.invoice_service import InvoiceService
from schemas.invoice import (
     InvoiceCreate,
     InvoiceResponse,
     InvoiceListResponse,
     InvoiceStatusEnum,
)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _build_invoice_response(invoice: Invoice) -> InvoiceResponse:
     return InvoiceResponse(
          id=invoice.id,
          creator_address=invoice.creator_address,
          amount=invoice.amount,
          token_symbol=invoice.token_symbol,
          memo=invoice.memo,
          status=InvoiceStatusEnum(invoice.status.value),
          created_at=invoice.created_at,
          payment_link=f"/pay/{invoice.id}",
     )


@router.post(
     "",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a payment request"
)
def create_invoice(
     invoice_data: InvoiceCreate,
     db: Session = Depends(get_session),
):
     """
     Create an open invoice.

     - **creator_address**: payee wallet address
     - **amount**: requested amount (must be positive)
     - **memo**: optional note
     - **token_symbol**: defaults to USDT0
     """
     try:
          invoice = InvoiceService.create_invoice(
               db,
               creator_address=invoice_data.creator_address,
               amount=invoice_data.amount,
               memo=invoice_data.memo,
               token_symbol=invoice_data.token_symbol,
          )
     except ValueError as e:
          raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

     db.commit()
     db.refresh(invoice)
     return _build_invoice_response(invoice)


@router.get(
     "",
     response_model=InvoiceListResponse,
     summary="List invoices"
)
def list_invoices(
     creator_address: Optional[str] = Query(None, description="Filter by payee wallet"),
     status: Optional[InvoiceStatusEnum] = Query(None, description="Filter by status"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
):
     invoices, total = InvoiceService.list_invoices(
          db,
          creator_address=creator_address,
          status=InvoiceStatus(status.value) if status else None,
          page=page,
          page_size=page_size,
     )
     return InvoiceListResponse(
          invoices=[_build_invoice_response(inv) for inv in invoices],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(invoice_id: str, db: Session = Depends(get_session)):
     invoice = InvoiceService.get_invoice(db, invoice_id)
     if not invoice:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Invoice with ID {invoice_id} not found"
          )
     return _build_invoice_response(invoice)
