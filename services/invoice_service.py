# services/invoice_service.py
"""
Invoice Service - Business logic layer for invoice operations.

This service handles invoice creation, lookup and settlement rules
separate from the API layer.
"""
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session

from config import DEFAULT_TOKEN_SYMBOL
from models import Invoice, Payment
from models.invoice import InvoiceStatus


class InvoiceAlreadyPaid(ValueError):
     pass


class InvalidPayeeAddress(ValueError):
     pass


class DuplicatePayment(ValueError):
     pass


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def create_invoice(
          db: Session,
          creator_address: str,
          amount: Decimal,
          memo: Optional[str] = None,
          token_symbol: str = DEFAULT_TOKEN_SYMBOL,
     ) -> Invoice:
          """
          Create an open invoice payable to creator_address.

          Args:
               db: SQLAlchemy database session
               creator_address: Payee wallet address
               amount: Requested amount (must be positive)
               memo: Optional note shown to the payer
               token_symbol: Requested token (default: USDT0)

          Returns:
               Created Invoice object

          Raises:
               ValueError: If the address is blank or the amount not positive
          """
          creator_address = (creator_address or "").strip()
          if not creator_address:
               raise ValueError("Please enter your wallet address.")
          if amount is None or amount <= 0:
               raise ValueError("Please enter a valid amount.")

          invoice = Invoice(
               creator_address=creator_address,
               amount=amount,
               memo=(memo or "").strip() or None,
               token_symbol=token_symbol,
               status=InvoiceStatus.OPEN,
          )
          db.add(invoice)
          db.flush()  # Flush to get the ID without committing
          return invoice

     @staticmethod
     def get_invoice(db: Session, invoice_id: str) -> Optional[Invoice]:
          return db.query(Invoice).filter(Invoice.id == invoice_id).first()

     @staticmethod
     def list_invoices(
          db: Session,
          creator_address: Optional[str] = None,
          status: Optional[InvoiceStatus] = None,
          page: int = 1,
          page_size: int = 50,
     ) -> tuple[list[Invoice], int]:
          """Return (invoices, total) newest first."""
          query = db.query(Invoice)
          if creator_address:
               query = query.filter(Invoice.creator_address == creator_address.strip())
          if status:
               query = query.filter(Invoice.status == status)

          total = query.count()
          offset = (page - 1) * page_size
          invoices = query.order_by(Invoice.created_at.desc()).offset(offset).limit(page_size).all()
          return invoices, total

     @staticmethod
     def check_payable(invoice: Invoice) -> None:
          """
          Raises:
               InvoiceAlreadyPaid: If the invoice is already settled
               InvalidPayeeAddress: If the payee is not a 0x address
          """
          if invoice.is_paid:
               raise InvoiceAlreadyPaid("This invoice is already marked as paid.")
          payee = (invoice.creator_address or "").strip()
          if not payee.startswith("0x"):
               raise InvalidPayeeAddress("Invoice payee address looks invalid.")

     @staticmethod
     def record_payment(
          db: Session,
          invoice: Invoice,
          payer_address: str,
          tx_hash: str,
          amount: Decimal,
          token_symbol: str,
          chain_id: int,
     ) -> Payment:
          """
          Save a confirmed on-chain payment and mark the invoice paid.

          Raises:
               InvoiceAlreadyPaid, InvalidPayeeAddress: see check_payable
               DuplicatePayment: If tx_hash was already recorded
          """
          InvoiceService.check_payable(invoice)

          existing = db.query(Payment).filter(Payment.tx_hash == tx_hash).first()
          if existing:
               raise DuplicatePayment(f"Payment with tx hash {tx_hash} already recorded")

          payment = Payment(
               invoice_id=invoice.id,
               payer_address=payer_address,
               payee_address=invoice.creator_address.strip(),
               chain_id=chain_id,
               tx_hash=tx_hash,
               amount=amount,
               token_symbol=token_symbol,
          )
          db.add(payment)
          invoice.mark_as_paid()
          db.flush()
          return payment
