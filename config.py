# config.py
"""
Application settings read from the environment (.env is loaded on import).

ProofRails settings are grouped into ProofRailsConfig so the client and the
receipt tracker receive them explicitly instead of reading os.environ.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

FLARE_TESTNET_CHAIN_ID = 114
DEFAULT_TOKEN_SYMBOL = "USDT0"


def _int_env(name: str, default: int) -> int:
     value = os.getenv(name)
     if value is None or not value.strip():
          return default
     return int(value)


@dataclass(frozen=True)
class ProofRailsConfig:
     """Connection and polling settings for the ProofRails middleware."""
     base_url: str = ""
     api_key: str = ""
     poll_interval_ms: int = 2000
     timeout_ms: int = 90_000
     request_timeout: float = 10.0
     chain: str = "coston2"

     def __post_init__(self):
          # Frozen dataclass: normalize through object.__setattr__
          object.__setattr__(self, "base_url", (self.base_url or "").strip().rstrip("/"))
          object.__setattr__(self, "api_key", (self.api_key or "").strip())
          if self.poll_interval_ms < 0:
               raise ValueError("poll_interval_ms must not be negative")
          if self.timeout_ms <= 0:
               raise ValueError("timeout_ms must be positive")

     @classmethod
     def from_env(cls) -> "ProofRailsConfig":
          return cls(
               base_url=os.getenv("PROOFRAILS_BASE_URL", ""),
               api_key=os.getenv("PROOFRAILS_API_KEY", ""),
               poll_interval_ms=_int_env("PROOFRAILS_POLL_INTERVAL_MS", 2000),
               timeout_ms=_int_env("PROOFRAILS_TIMEOUT_MS", 90_000),
               request_timeout=float(os.getenv("PROOFRAILS_REQUEST_TIMEOUT", "10")),
               chain=os.getenv("PROOFRAILS_CHAIN", "coston2").strip() or "coston2",
          )

     @property
     def receipts_url(self) -> str:
          """Status endpoint polled by the receipt tracker."""
          return f"{self.base_url}/v1/iso/receipts"


CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = _int_env("PORT", 10000)
