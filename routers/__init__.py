# routers/__init__.py
from .invoices import router as invoices_router
from .payments import router as payments_router
from .proofs import router as proofs_router
from .proofrails import router as proofrails_router

__all__ = [
     "invoices_router",
     "payments_router",
     "proofs_router",
     "proofrails_router",
]
