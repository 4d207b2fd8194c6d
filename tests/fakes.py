"""
Test doubles for the ProofRails middleware and the tracker's time source.
"""

import json


class FakeResponse:
    """Just enough of requests.Response for the client and tracker."""

    def __init__(self, status_code=200, body=None, text=None, reason=""):
        self.status_code = status_code
        self.reason = reason or ("OK" if status_code < 400 else "Error")
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        import requests

        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeSession:
    """
    Routes (method, url) to canned responses.

    A route value may be a FakeResponse, an exception instance (raised), or a
    list of either (consumed in order, last one repeats).
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _dispatch(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        key = (method, url)
        if key not in self.routes:
            return FakeResponse(404, {"detail": "Not Found"})
        value = self.routes[key]
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        return value

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._dispatch("POST", url, **kwargs)

    def calls_to(self, method, url):
        return [c for c in self.calls if c["method"] == method and c["url"] == url]


class FakeClock:
    """Monotonic clock in seconds, advanced only by sleep()."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedFetch:
    """Fetch function returning (or raising) scripted results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, url, timeout):
        self.calls.append((url, timeout))
        value = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(value, Exception):
            raise value
        return value


BASE_URL = "http://proofrails.test"
RECORD_TIP_URL = f"{BASE_URL}/v1/iso/record-tip"
PAYEE = "0x8ba1f109551bD432803012645Ac136ddd64DBA72"
PAYER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def receipt_url(receipt_id):
    return f"{BASE_URL}/v1/iso/receipts/{receipt_id}"


def payment_body(tx_hash="0xabc123", amount="12.5", token_symbol="USDT0"):
    return {
        "payer_address": PAYER,
        "tx_hash": tx_hash,
        "amount": amount,
        "token_symbol": token_symbol,
    }


def created(receipt_id="rcpt-0001-abcdef", status="pending"):
    return FakeResponse(200, {"receipt_id": receipt_id, "status": status})
