# models/proof.py
"""
Proof model - the shareable record of a payment.

A proof is created together with its payment and is addressed publicly by
public_slug. ProofRails fields are filled in later and may stay empty when
the middleware is unavailable.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, new_id


class Proof(Base):
     __tablename__ = "proofs"

     id = Column(String(36), primary_key=True, default=new_id)
     payment_id = Column(
          String(36),
          ForeignKey("payments.id", ondelete="CASCADE"),
          nullable=False,
          unique=True,  # One proof per payment
          index=True
     )
     public_slug = Column(String(64), nullable=False, unique=True, index=True)

     # On-chain anchor submitted from the proof page
     anchored_on_flare = Column(Boolean, default=False, nullable=False)
     flare_anchor_ref = Column(String(80), nullable=True)

     # ProofRails receipt
     proofrails_record_type = Column(String(32), nullable=True)
     proofrails_receipt_id = Column(String(128), nullable=True, index=True)
     proofrails_status = Column(String(32), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     payment = relationship("Payment", back_populates="proof")

     def __repr__(self):
          return f"<Proof(id={self.id}, slug='{self.public_slug}', receipt={self.proofrails_receipt_id})>"

     @property
     def has_receipt(self) -> bool:
          return bool(self.proofrails_receipt_id)
