# models/__init__.py
from .base import Base
from .invoice import Invoice, InvoiceStatus
from .payment import Payment
from .proof import Proof

__all__ = [
     "Base",
     "Invoice",
     "InvoiceStatus",
     "Payment",
     "Proof",
]
