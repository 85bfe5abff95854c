"""Error taxonomy for the payment webhook.

Every error carries the HTTP status it maps to, a machine-stable ``code``
for logs, and the ``message`` returned to the caller in the
``{"ok": false, "error": message}`` body.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse


class WebhookError(Exception):
    """Base class for errors surfaced as structured JSON responses."""

    status_code: int = 400
    code: str = "webhook_error"
    message: str = "Bad request"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        return JSONResponse({"ok": False, "error": self.message}, status_code=self.status_code)


# ── Authentication ─────────────────────────────────────────────────────────


class SignatureError(WebhookError):
    status_code = 401
    code = "signature_error"
    message = "Unauthorized"


class MissingSignatureError(SignatureError):
    """No X-Signature header, or only whitespace."""

    code = "missing_signature"
    message = "Missing X-Signature"


class BadSignatureError(SignatureError):
    """Signature present but wrong length or wrong digest."""

    code = "bad_signature"
    message = "Bad signature"


# ── Payload validation ────────────────────────────────────────────────────


class PaymentValidationError(WebhookError):
    status_code = 400
    code = "validation_error"
    message = "Invalid payload"


class InvalidEncodingError(PaymentValidationError):
    code = "invalid_encoding"
    message = "Invalid JSON"


class WrongTypeError(PaymentValidationError):
    code = "wrong_type"
    message = "type must be pay_received"


class InvalidPayerError(PaymentValidationError):
    code = "invalid_payer"
    message = "payer must be string"


class InvalidAmountError(PaymentValidationError):
    code = "invalid_amount"
    message = "amount must be number"


class InvalidTimestampError(PaymentValidationError):
    code = "invalid_timestamp"
    message = "ts must be string"


class InvalidRawError(PaymentValidationError):
    code = "invalid_raw"
    message = "raw must be string"


# ── Server ────────────────────────────────────────────────────────────────


class InternalError(WebhookError):
    """Unexpected failure during ingestion. Details go to the log only."""

    status_code = 500
    code = "internal_error"
    message = "Server error"
