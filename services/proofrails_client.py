# services/proofrails_client.py
"""
ProofRails middleware client.

The middleware turns a confirmed tip/payment into an ISO 20022 receipt and
anchors it on Flare in the background:

- POST /v1/iso/record-tip        create a receipt, returns {receipt_id, status}
- GET  /v1/iso/receipts/{id}     receipt with anchoring status
- GET  /v1/iso/messages/{id}     generated ISO message record (optional)
- GET  /files/{id}/<name>.json   raw artifacts (tip.json, receipt.json)

Requests authenticate with the x-api-key header.
"""
import json
import logging
from typing import Any, Optional

import requests

from config import ProofRailsConfig

logger = logging.getLogger(__name__)

REQUIRED_TIP_FIELDS = (
     "tip_tx_hash",
     "chain",
     "amount",
     "currency",
     "sender_wallet",
     "receiver_wallet",
     "reference",
)

EXPECTED_TIP_SHAPE = {
     "tip_tx_hash": "0x...",
     "chain": "coston2",
     "amount": "0.01",
     "currency": "C2FLR",
     "sender_wallet": "0x...",
     "receiver_wallet": "0x...",
     "reference": "uuid-or-string",
}

CREATE_FAILURE_TIP = """Your middleware expects:
- header: x-api-key: <api key>
- POST {url}

Common failures:
- 401: api key missing/invalid/revoked (regenerate from /v1/public/api-keys)
- 422: payload doesn't match TipRecordRequest
- 500: middleware failed during processing (check middleware logs)"""


class ProofRailsError(Exception):
     """Base class for ProofRails failures."""

     def to_dict(self) -> dict:
          return {"ok": False, "error": str(self)}


class ProofRailsNotConfigured(ProofRailsError):
     def __init__(self, setting: str, hint: str):
          super().__init__(f"{setting} missing")
          self.setting = setting
          self.hint = hint

     def to_dict(self) -> dict:
          return {"ok": False, "error": str(self), "hint": self.hint}


class ProofRailsUnavailable(ProofRailsError):
     """The middleware could not be reached at all."""

     def __init__(self, url: str, details: str):
          super().__init__("Could not reach ProofRails middleware")
          self.url = url
          self.details = details

     def to_dict(self) -> dict:
          return {
               "ok": False,
               "error": str(self),
               "hint": "Confirm middleware is running and reachable at PROOFRAILS_BASE_URL.",
               "url": self.url,
               "details": self.details,
          }


class ProofRailsRequestFailed(ProofRailsError):
     """The middleware answered with a non-2xx status."""

     def __init__(
          self,
          message: str,
          *,
          status_code: int,
          status_text: str = "",
          url: str = "",
          raw_text: str = "",
          raw_json: Any = None,
          request_sent: Any = None,
     ):
          super().__init__(message)
          self.status_code = status_code
          self.status_text = status_text
          self.url = url
          self.raw_text = raw_text
          self.raw_json = raw_json
          self.request_sent = request_sent

     @property
     def detail(self) -> Optional[str]:
          """Error message the middleware gave us, if any."""
          if isinstance(self.raw_json, dict):
               for key in ("detail", "error", "message"):
                    value = self.raw_json.get(key)
                    if isinstance(value, str) and value:
                         return value
          return None

     def to_dict(self) -> dict:
          body = {
               "ok": False,
               "error": str(self),
               "httpStatus": self.status_code,
               "httpStatusText": self.status_text,
               "middlewareUrl": self.url,
               "rawResponseText": self.raw_text,
               "rawResponseJson": self.raw_json,
          }
          if self.request_sent is not None:
               body["requestSent"] = self.request_sent
               body["tip"] = CREATE_FAILURE_TIP.format(url=self.url)
          return body


def pretty_json(value: Any) -> str:
     try:
          return json.dumps(value, indent=2, default=str)
     except (TypeError, ValueError):
          return str(value)


def build_diagnostic(summary: str, raw: Any, message: Optional[str] = None) -> dict:
     """
     Diagnostic payload shown to users when the receipt step fails.

     The raw payload is always included, both as-is and pretty printed.
     """
     lines = [summary]
     if message:
          lines += ["", "Message:", message]
     lines += ["", "Raw response:", pretty_json(raw)]
     return {
          "error": message or summary,
          "summary": summary,
          "raw": raw,
          "text": "\n".join(lines),
     }


def _to_text(value: Any) -> Optional[str]:
     if value is None:
          return None
     return str(value).strip()


def pick_tip(body: Any) -> dict:
     """
     Normalize a tip payload.

     Supports both shapes:
     1) {"tip": {"tx_hash", "chain", "amount", "currency", "sender", "receiver", "reference"}}
     2) {"tip_tx_hash", "chain", "amount", "currency", "sender_wallet", "receiver_wallet", "reference"}
     """
     if not isinstance(body, dict):
          body = {}
     tip = body.get("tip")
     if not isinstance(tip, dict):
          tip = body

     def first(*keys):
          for key in keys:
               if tip.get(key) is not None:
                    return tip.get(key)
          return None

     callback_url = first("callback_url")
     if callback_url is None:
          callback_url = body.get("callback_url")

     payload = {
          "tip_tx_hash": _to_text(first("tip_tx_hash", "tx_hash", "txHash")),
          "chain": _to_text(first("chain")),
          "amount": _to_text(first("amount")) or "",
          "currency": _to_text(first("currency")),
          "sender_wallet": _to_text(first("sender_wallet", "sender", "from")),
          "receiver_wallet": _to_text(first("receiver_wallet", "receiver", "to")),
          "reference": _to_text(first("reference")),
     }
     if callback_url:
          payload["callback_url"] = str(callback_url).strip()
     return payload


def missing_fields(payload: dict) -> list[str]:
     return [name for name in REQUIRED_TIP_FIELDS if not payload.get(name)]


def _read_raw(response: requests.Response) -> tuple[str, Any]:
     text = response.text
     try:
          return text, json.loads(text)
     except ValueError:
          return text, None


class ProofRailsClient:
     """Thin requests-based wrapper around the ProofRails middleware."""

     def __init__(self, config: ProofRailsConfig, session: Optional[requests.Session] = None):
          self.config = config
          self.session = session or requests.Session()

     @property
     def base_url(self) -> str:
          return self.config.base_url

     def require_base_url(self) -> None:
          if not self.config.base_url:
               raise ProofRailsNotConfigured(
                    "PROOFRAILS_BASE_URL",
                    "Set PROOFRAILS_BASE_URL=http://localhost:8787 in .env then restart the server.",
               )

     def require_api_key(self) -> None:
          if not self.config.api_key:
               raise ProofRailsNotConfigured(
                    "PROOFRAILS_API_KEY",
                    "Generate one from middleware: POST <PROOFRAILS_BASE_URL>/v1/public/api-keys, "
                    "then set PROOFRAILS_API_KEY in .env and restart the server.",
               )

     def _headers(self, *, no_cache: bool = False) -> dict:
          headers = {"content-type": "application/json"}
          if self.config.api_key:
               headers["x-api-key"] = self.config.api_key
          if no_cache:
               headers["Cache-Control"] = "no-cache"
          return headers

     def _get(self, url: str) -> requests.Response:
          try:
               return self.session.get(
                    url,
                    headers=self._headers(no_cache=True),
                    timeout=self.config.request_timeout,
               )
          except requests.RequestException as e:
               logger.error("ProofRails GET %s failed: %s", url, e)
               raise ProofRailsUnavailable(url, str(e)) from e

     def record_tip(self, tip: dict) -> Any:
          """
          Create a receipt for a confirmed tip/payment.

          Args:
               tip: Normalized payload (see pick_tip)

          Returns:
               Parsed middleware response, or the raw text when it is not JSON

          Raises:
               ProofRailsNotConfigured, ProofRailsUnavailable, ProofRailsRequestFailed
          """
          self.require_base_url()
          self.require_api_key()
          url = f"{self.base_url}/v1/iso/record-tip"

          try:
               response = self.session.post(
                    url,
                    json=tip,
                    headers=self._headers(),
                    timeout=self.config.request_timeout,
               )
          except requests.RequestException as e:
               logger.error("ProofRails create failed, middleware unreachable at %s: %s", url, e)
               raise ProofRailsUnavailable(url, str(e)) from e

          text, parsed = _read_raw(response)
          if not response.ok:
               logger.error("ProofRails create failed: HTTP %s %s", response.status_code, text[:200])
               raise ProofRailsRequestFailed(
                    "PROOFRAILS CREATE FAILED",
                    status_code=response.status_code,
                    status_text=response.reason or "",
                    url=url,
                    raw_text=text,
                    raw_json=parsed,
                    request_sent=tip,
               )
          return parsed if parsed is not None else text

     def get_receipt(self, receipt_id: str) -> Any:
          """Fetch a receipt; raises ProofRailsRequestFailed on non-2xx."""
          self.require_base_url()
          url = f"{self.base_url}/v1/iso/receipts/{receipt_id}"
          response = self._get(url)
          text, parsed = _read_raw(response)
          if not response.ok:
               raise ProofRailsRequestFailed(
                    "Failed to load receipt from middleware",
                    status_code=response.status_code,
                    status_text=response.reason or "",
                    url=url,
                    raw_text=text,
                    raw_json=parsed,
               )
          return parsed

     def get_messages(self, receipt_id: str) -> Any:
          """ISO message record for a receipt; None when unavailable."""
          return self._get_optional(f"{self.base_url}/v1/iso/messages/{receipt_id}")

     def get_file(self, receipt_id: str, name: str) -> Any:
          """Raw artifact such as tip.json; None when unavailable."""
          return self._get_optional(f"{self.base_url}/files/{receipt_id}/{name}")

     def _get_optional(self, url: str) -> Any:
          try:
               response = self._get(url)
          except ProofRailsUnavailable:
               return None
          if not response.ok:
               return None
          return _read_raw(response)[1]

     def links(self, receipt_id: str, receipt: Any = None) -> dict:
          base = self.base_url
          receipt = receipt if isinstance(receipt, dict) else {}
          xml_url = receipt.get("xml_url")
          bundle_url = receipt.get("bundle_url")
          return {
               "receiptUrl": f"{base}/receipt/{receipt_id}",
               "xml_url": f"{base}{xml_url}" if isinstance(xml_url, str) else None,
               "bundle_url": f"{base}{bundle_url}" if isinstance(bundle_url, str) else None,
               "receipt_json_url": f"{base}/files/{receipt_id}/receipt.json",
               "tip_json_url": f"{base}/files/{receipt_id}/tip.json",
          }
