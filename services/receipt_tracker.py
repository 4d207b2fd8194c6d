# services/receipt_tracker.py
"""
Receipt Status Tracker - waits for a ProofRails receipt to be anchored.

ProofRails responses are not consistently enveloped (the same field can show
up at the top level or under "receipt", "data", ...), so identifier and
status are probed over an ordered list of candidate paths. The first
non-empty string wins.

Polling is a plain blocking loop: fetch, check, sleep. Only the literal
status "anchored" (case-insensitive) ends it early; anything else, including
failed fetches, keeps polling until the deadline.
"""
import logging
import threading
import time
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

import requests

from config import ProofRailsConfig

logger = logging.getLogger(__name__)

TERMINAL_STATUS = "anchored"

Path = Tuple[str, ...]

# Candidate locations, in priority order
IDENTIFIER_PATHS: Sequence[Path] = (
     (),
     ("receipt",),
     ("data",),
     ("result",),
     ("payload",),
     ("response",),
     ("body",),
     ("json",),
     ("receipt", "receipt"),
     ("data", "receipt"),
     ("result", "receipt"),
     ("response", "receipt"),
)
STATUS_PATHS: Sequence[Path] = tuple(p for p in IDENTIFIER_PATHS if len(p) < 2)

IDENTIFIER_ALIASES = ("receipt_id", "receiptId", "rid", "id", "receiptID")
STATUS_ALIASES = ("status", "receipt_status", "state")

# Fields consulted by the polling loop: receipt wrapper first, then top level
POLL_STATUS_FIELDS: Sequence[Path] = (
     ("receipt", "status"),
     ("receipt", "state"),
     ("receipt", "receipt_status"),
     ("status",),
     ("state",),
     ("receipt_status",),
)


class ReceiptTimeout(Exception):
     """Deadline passed before the receipt reached the anchored state."""

     def __init__(self, record_id: str, elapsed_ms: float, last_status: Optional[str] = None):
          super().__init__(
               f"Timed out waiting for anchoring of receipt {record_id} "
               f"after {elapsed_ms:.0f} ms (last status: {last_status or 'unknown'})"
          )
          self.record_id = record_id
          self.elapsed_ms = elapsed_ms
          self.last_status = last_status


class TrackingCancelled(Exception):
     """Polling was stopped through the cancellation event."""

     def __init__(self, record_id: str):
          super().__init__(f"Tracking of receipt {record_id} was cancelled")
          self.record_id = record_id


class MissingIdentifier(Exception):
     """
     A create response carried no recognizable receipt id.

     The raw response is kept so callers can show it for diagnosis.
     """

     def __init__(self, raw: Any):
          super().__init__("PROOFRAILS RESPONSE HAD NO RECEIPT ID")
          self.raw = raw


def _walk(body: Any, path: Path) -> Any:
     node = body
     for key in path:
          if not isinstance(node, dict):
               return None
          node = node.get(key)
     return node


def _first_string(body: Any, paths: Iterable[Path], aliases: Iterable[str]) -> Optional[str]:
     aliases = tuple(aliases)
     for path in paths:
          node = _walk(body, path)
          if not isinstance(node, dict):
               continue
          for alias in aliases:
               value = node.get(alias)
               if isinstance(value, str) and value.strip():
                    return value.strip()
     return None


def extract_identifier(body: Any) -> Optional[str]:
     """Return the receipt id found in a ProofRails response, or None."""
     return _first_string(body, IDENTIFIER_PATHS, IDENTIFIER_ALIASES)


def extract_status(body: Any) -> Optional[str]:
     """Return the receipt status found in a ProofRails response, or None."""
     return _first_string(body, STATUS_PATHS, STATUS_ALIASES)


def poll_status(body: Any) -> Optional[str]:
     """Status as seen by the polling loop (receipt wrapper before top level)."""
     for path in POLL_STATUS_FIELDS:
          value = _walk(body, path)
          if isinstance(value, str) and value.strip():
               return value.strip()
     return None


FetchFn = Callable[[str, float], Any]


class ReceiptStatusTracker:
     """
     Polls the receipt status endpoint until a receipt is anchored.

     Usage:
          tracker = ReceiptStatusTracker(ProofRailsConfig.from_env())
          body = tracker.await_anchored(receipt_id)

     fetch, sleep and clock are injectable; fetch(url, timeout_seconds)
     must return the parsed JSON body or raise.
     """

     def __init__(
          self,
          config: ProofRailsConfig,
          *,
          session: Optional[requests.Session] = None,
          fetch: Optional[FetchFn] = None,
          sleep: Callable[[float], None] = time.sleep,
          clock: Callable[[], float] = time.monotonic,
     ):
          self.config = config
          self._session = session
          self._fetch = fetch or self._http_fetch
          self._sleep = sleep
          self._clock = clock

     def _http_fetch(self, url: str, timeout: float) -> Any:
          if self._session is None:
               self._session = requests.Session()
          headers = {"Cache-Control": "no-cache", "Pragma": "no-cache"}
          if self.config.api_key:
               headers["x-api-key"] = self.config.api_key
          response = self._session.get(url, headers=headers, timeout=timeout)
          response.raise_for_status()
          return response.json()

     def status_url(self, record_id: str) -> str:
          return f"{self.config.receipts_url}/{record_id}"

     def _now_ms(self) -> float:
          return self._clock() * 1000.0

     def await_anchored(
          self,
          record_id: str,
          timeout_ms: Optional[int] = None,
          cancel: Optional[threading.Event] = None,
     ) -> Any:
          """
          Block until the receipt reports "anchored" or the deadline passes.

          Args:
               record_id: Receipt id returned by the create call
               timeout_ms: Overall deadline (defaults to config.timeout_ms)
               cancel: Optional event checked before every attempt

          Returns:
               The last fetched response body, unmodified

          Raises:
               ValueError: If record_id is empty
               ReceiptTimeout: If the deadline passes first
               TrackingCancelled: If cancel was set
          """
          if not record_id or not record_id.strip():
               raise ValueError("record_id must be a non-empty string")
          if timeout_ms is None:
               timeout_ms = self.config.timeout_ms
          if timeout_ms <= 0:
               raise ValueError("timeout_ms must be positive")

          url = self.status_url(record_id)
          start = self._now_ms()
          attempts = 0
          last_status = None

          while self._now_ms() - start < timeout_ms:
               if cancel is not None and cancel.is_set():
                    raise TrackingCancelled(record_id)

               attempts += 1
               remaining_s = max((timeout_ms - (self._now_ms() - start)) / 1000.0, 0.001)
               request_timeout = min(self.config.request_timeout, remaining_s)

               body = None
               try:
                    body = self._fetch(url, request_timeout)
               except Exception as e:
                    # Network errors, non-2xx and bad JSON all mean "no status yet"
                    logger.warning("Receipt %s poll attempt %d failed: %s", record_id, attempts, e)

               status = poll_status(body)
               if status is not None:
                    last_status = status
               if status is not None and status.lower() == TERMINAL_STATUS:
                    logger.info("Receipt %s anchored after %d attempt(s)", record_id, attempts)
                    return body

               self._sleep(self.config.poll_interval_ms / 1000.0)

          elapsed = self._now_ms() - start
          logger.warning(
               "Receipt %s not anchored after %.0f ms (%d attempts, last status %s)",
               record_id, elapsed, attempts, last_status,
          )
          raise ReceiptTimeout(record_id, elapsed, last_status)
