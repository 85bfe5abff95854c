"""Webhook signature verification: constant-time HMAC-SHA256.

Security contract:
- Signature is the lowercase hex HMAC-SHA256 of the raw request body,
  sent in the X-Signature header
- Verification runs over the body bytes exactly as received, before any
  JSON decoding (re-serializing would break non byte-stable payloads)
- Digests are compared with hmac.compare_digest() (constant-time)
- Length mismatch is rejected before the comparison; the length of a hex
  digest is public, so the early return leaks nothing new
- Missing header -> MissingSignatureError, wrong signature -> BadSignatureError
"""

from __future__ import annotations

import hashlib
import hmac

from mcpay.errors import BadSignatureError, MissingSignatureError

SIGNATURE_HEADER = "x-signature"


def _key(secret: str | bytes) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def compute_signature(secret: str | bytes, body: bytes) -> str:
    """Return the hex HMAC-SHA256 of *body* under *secret* (64 lowercase chars)."""
    return hmac.new(_key(secret), body, hashlib.sha256).hexdigest()


def verify_signature(secret: str | bytes, body: bytes, signature: str | None) -> bool:
    """Verify a hex HMAC-SHA256 signature over the raw body.

    Args:
        secret: Shared webhook secret
        body: Raw request body bytes
        signature: Claimed signature (surrounding whitespace is ignored)

    Returns:
        True if the signature is valid
    """
    if not signature:
        return False

    claimed = signature.strip().encode("utf-8")
    expected = compute_signature(secret, body).encode("ascii")

    if len(claimed) != len(expected):
        return False

    return hmac.compare_digest(claimed, expected)


def authenticate(secret: str | bytes, body: bytes, signature_header: str | None) -> None:
    """Authenticate a webhook request or raise.

    Raises:
        MissingSignatureError: header absent or blank
        BadSignatureError: header present but does not match
    """
    if signature_header is None or not signature_header.strip():
        raise MissingSignatureError()

    if not verify_signature(secret, body, signature_header):
        raise BadSignatureError()
