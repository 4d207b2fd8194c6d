# models/payment.py
"""
Payment model - an on-chain settlement of an invoice.

Written once the wallet reports the transaction confirmed; the tx hash is
the external proof of the value transfer.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from config import FLARE_TESTNET_CHAIN_ID
from .base import Base, new_id


class Payment(Base):
     __tablename__ = "payments"

     id = Column(String(36), primary_key=True, default=new_id)
     invoice_id = Column(
          String(36),
          ForeignKey("invoices.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     payer_address = Column(String(64), nullable=False)
     payee_address = Column(String(64), nullable=False)
     chain_id = Column(Integer, nullable=False, default=FLARE_TESTNET_CHAIN_ID)
     tx_hash = Column(String(80), nullable=False, unique=True, index=True)
     amount = Column(Numeric(18, 6), nullable=False)
     token_symbol = Column(String(16), nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     invoice = relationship("Invoice", back_populates="payments")
     proof = relationship("Proof", back_populates="payment", uselist=False)

     def __repr__(self):
          return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, tx={self.tx_hash[:12]}...)>"
