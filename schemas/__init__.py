# schemas/__init__.py
from .invoice import (
     InvoiceCreate,
     InvoiceResponse,
     InvoiceListResponse,
     InvoiceStatusEnum,
)
from .payment import PaymentConfirmRequest, PaymentConfirmResponse, PaymentResponse
from .proof import ProofResponse, ProofDetailResponse, AnchorRequest

__all__ = [
     "InvoiceCreate",
     "InvoiceResponse",
     "InvoiceListResponse",
     "InvoiceStatusEnum",
     "PaymentConfirmRequest",
     "PaymentConfirmResponse",
     "PaymentResponse",
     "ProofResponse",
     "ProofDetailResponse",
     "AnchorRequest",
]
