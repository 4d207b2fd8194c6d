# dependencies.py
"""
FastAPI dependencies shared by the routers.

The client and tracker are built once per process so their requests
sessions (and connection pools) are reused across requests. Tests replace
these through app.dependency_overrides.
"""
from functools import lru_cache

from config import ProofRailsConfig
from services.proofrails_client import ProofRailsClient
from services.receipt_tracker import ReceiptStatusTracker


@lru_cache
def get_proofrails_config() -> ProofRailsConfig:
     return ProofRailsConfig.from_env()


@lru_cache
def get_proofrails_client() -> ProofRailsClient:
     return ProofRailsClient(get_proofrails_config())


@lru_cache
def get_receipt_tracker() -> ReceiptStatusTracker:
     return ReceiptStatusTracker(get_proofrails_config())
