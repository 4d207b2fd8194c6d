# routers/proofrails.py
"""
ProofRails proxy routes.

Keeps the API key on the server. Failures are returned with the raw
middleware response attached so integration problems can be debugged from
the browser.
"""
import json

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from dependencies import get_proofrails_client
from services.proofrails_client import (
     EXPECTED_TIP_SHAPE,
     ProofRailsClient,
     ProofRailsError,
     ProofRailsNotConfigured,
     ProofRailsRequestFailed,
     ProofRailsUnavailable,
     missing_fields,
     pick_tip,
)
from services.receipt_view import build_receipt_summary

router = APIRouter(prefix="/api/proofrails", tags=["proofrails"])


@router.post("/create", summary="Create a ProofRails tip receipt")
async def create_receipt(request: Request, client: ProofRailsClient = Depends(get_proofrails_client)):
     try:
          body = json.loads(await request.body())
     except ValueError:
          return JSONResponse(
               status_code=status.HTTP_400_BAD_REQUEST,
               content={"ok": False, "error": "Invalid JSON body", "hint": "Send JSON with the tip fields."},
          )

     try:
          client.require_base_url()
          client.require_api_key()
     except ProofRailsNotConfigured as e:
          return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=e.to_dict())

     payload = pick_tip(body)
     missing = missing_fields(payload)
     if missing:
          return JSONResponse(
               status_code=status.HTTP_400_BAD_REQUEST,
               content={
                    "ok": False,
                    "error": "Missing required fields",
                    "missing": missing,
                    "received": body,
                    "expectedShape": EXPECTED_TIP_SHAPE,
               },
          )

     try:
          receipt = await run_in_threadpool(client.record_tip, payload)
     except (ProofRailsUnavailable, ProofRailsRequestFailed) as e:
          return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=e.to_dict())

     return {
          "ok": True,
          "receipt": receipt,
          "middlewareUrl": f"{client.base_url}/v1/iso/record-tip",
          "requestSent": payload,
     }


@router.get("/status", summary="Raw receipt status")
def receipt_status(
     receipt_id: str = Query("", alias="receiptId"),
     client: ProofRailsClient = Depends(get_proofrails_client),
):
     if not client.base_url:
          return JSONResponse(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               content={"error": "Missing PROOFRAILS_BASE_URL"},
          )
     if not client.config.api_key:
          return JSONResponse(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               content={"error": "Missing PROOFRAILS_API_KEY"},
          )
     if not receipt_id.strip():
          return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Missing receiptId"})

     try:
          return client.get_receipt(receipt_id.strip())
     except ProofRailsRequestFailed as e:
          raw = e.raw_json if e.raw_json is not None else {}
          return JSONResponse(
               status_code=e.status_code,
               content={"error": e.detail or "ProofRails status failed", "raw": raw},
          )
     except ProofRailsError as e:
          return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})


@router.get("/receipt/{receipt_id}", summary="Receipt with record, links and summary")
def get_receipt(receipt_id: str, client: ProofRailsClient = Depends(get_proofrails_client)):
     receipt_id = receipt_id.strip()
     try:
          client.require_base_url()
     except ProofRailsNotConfigured as e:
          return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=e.to_dict())

     try:
          receipt = client.get_receipt(receipt_id)
     except ProofRailsRequestFailed as e:
          return JSONResponse(
               status_code=status.HTTP_502_BAD_GATEWAY,
               content={**e.to_dict(), "receiptId": receipt_id, "baseUrl": client.base_url},
          )
     except ProofRailsUnavailable as e:
          return JSONResponse(
               status_code=status.HTTP_502_BAD_GATEWAY,
               content={
                    "ok": False,
                    "error": "Could not reach middleware",
                    "receiptId": receipt_id,
                    "baseUrl": client.base_url,
                    "details": e.details,
               },
          )

     record = client.get_messages(receipt_id)
     links = client.links(receipt_id, receipt)
     summary = build_receipt_summary(
          receipt_id,
          receipt,
          record=record,
          tip_json=client.get_file(receipt_id, "tip.json"),
          receipt_json=client.get_file(receipt_id, "receipt.json"),
          links=links,
     )
     return {
          "ok": True,
          "baseUrl": client.base_url,
          "receipt": receipt,
          "record": record,
          "links": links,
          "summary": summary,
     }
