"""Webhook HTTP handler: FastAPI route for inbound payment notifications.

POST /mc-pay:
1. Reads raw body (needed for HMAC verification)
2. Verifies X-Signature over the raw bytes
3. Decodes and validates the pay_received payload
4. Records the payment in the ledger
5. Returns 200 {"ok": true}

Security contract:
- 401 for missing or bad signatures, before the body is decoded
- 400 with a stable error string for validation failures
- 500 "Server error" for anything unexpected; details go to the log only
- Every outcome is audit-logged; signatures and secrets never are
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mcpay.errors import InternalError, WebhookError
from mcpay.ledger import PaymentLedger
from mcpay.webhooks.validation import validate_payment
from mcpay.webhooks.verification import SIGNATURE_HEADER, authenticate

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/mc-pay"

# Webhook outcome counter for the audit log (in-memory, per process)
_webhook_counts: dict[str, int] = {}


def _log_webhook(status: str, payer: str | None = None) -> None:
    """Audit log for webhook activity."""
    _webhook_counts[status] = _webhook_counts.get(status, 0) + 1
    logger.info(
        "WEBHOOK_AUDIT status=%s payer=%s count=%d",
        status,
        payer or "-",
        _webhook_counts[status],
    )


def ingest(secret: str, ledger: PaymentLedger, body: bytes, signature: str | None) -> None:
    """Authenticate, validate and record one webhook body.

    Raises:
        WebhookError subclass for any authentication or validation failure
    """
    authenticate(secret, body, signature)
    event = validate_payment(body)
    entry = ledger.insert(event)
    _log_webhook("recorded", entry.payer)


def register_webhook_routes(app: FastAPI, ledger: PaymentLedger, secret: str) -> None:
    """Register the payment webhook route on the FastAPI app."""

    @app.post(WEBHOOK_PATH)
    async def mc_pay_webhook(request: Request):
        """Receive pay_received webhooks (signature-verified)."""
        start = time.time()

        # Read raw body for signature verification
        body = await request.body()

        try:
            ingest(secret, ledger, body, request.headers.get(SIGNATURE_HEADER))
        except WebhookError as exc:
            _log_webhook(exc.code)
            return exc.to_response()
        except Exception:
            logger.exception("Failed to ingest payment webhook")
            _log_webhook(InternalError.code)
            return InternalError().to_response()

        elapsed_ms = (time.time() - start) * 1000
        logger.debug("Webhook processed in %.1fms", elapsed_ms)

        return JSONResponse({"ok": True})

    logger.info("Webhook route registered: POST %s", WEBHOOK_PATH)
