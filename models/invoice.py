# models/invoice.py
import enum
from sqlalchemy import Column, String, Numeric, DateTime, Enum, func
from sqlalchemy.orm import relationship

from config import DEFAULT_TOKEN_SYMBOL
from .base import Base, new_id


class InvoiceStatus(str, enum.Enum):
     """Enumeration for invoice payment status."""
     OPEN = "open"
     PAID = "paid"


class Invoice(Base):
     """
     Invoice model - a payment request payable to the creator's wallet.

     The id doubles as the public payment link (/pay/<id>).
     """
     __tablename__ = "invoices"

     id = Column(String(36), primary_key=True, default=new_id)

     # Payee wallet address
     creator_address = Column(String(64), nullable=False, index=True)

     # Invoice details
     amount = Column(Numeric(18, 6), nullable=False)
     token_symbol = Column(String(16), nullable=False, default=DEFAULT_TOKEN_SYMBOL)
     memo = Column(String(500), nullable=True)
     status = Column(
          Enum(
               InvoiceStatus,
               name="invoice_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=InvoiceStatus.OPEN,
          nullable=False,
          index=True
     )

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     payments = relationship("Payment", back_populates="invoice")

     def __repr__(self):
          return f"<Invoice(id={self.id}, amount={self.amount}, status='{self.status.value}')>"

     @property
     def is_paid(self) -> bool:
          return self.status == InvoiceStatus.PAID

     def mark_as_paid(self) -> None:
          """Mark the invoice as paid."""
          self.status = InvoiceStatus.PAID
