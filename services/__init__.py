# services/__init__.py
from .invoice_service import InvoiceService
from .proofrails_client import ProofRailsClient
from .receipt_tracker import (
     ReceiptStatusTracker,
     ReceiptTimeout,
     MissingIdentifier,
     extract_identifier,
     extract_status,
)

__all__ = [
     "InvoiceService",
     "ProofRailsClient",
     "ReceiptStatusTracker",
     "ReceiptTimeout",
     "MissingIdentifier",
     "extract_identifier",
     "extract_status",
]
