"""Payload validation for pay_received webhooks.

The body is decoded into a generic JSON value first, then checked field by
field in a fixed order. The first failing check wins, so a payload that is
wrong in several ways always reports the same error.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from mcpay.errors import (
    InvalidAmountError,
    InvalidEncodingError,
    InvalidPayerError,
    InvalidRawError,
    InvalidTimestampError,
    WrongTypeError,
)

PAY_RECEIVED = "pay_received"


@dataclass(frozen=True)
class PaymentEvent:
    """A validated pay_received event."""

    payer: str
    amount: int | float
    ts: str
    raw: str = ""
    type: str = PAY_RECEIVED


def _decode(body: bytes) -> Any:
    # JSONDecodeError, UnicodeDecodeError and the str->int digit limit are all
    # ValueErrors; deeply nested arrays or objects hit the recursion limit
    try:
        return json.loads(body.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise InvalidEncodingError() from exc


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not amounts
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are always finite; math.isfinite overflows on huge ones
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _is_nonempty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def parse_payment(payload: Any) -> PaymentEvent:
    """Validate an already-decoded JSON value.

    Checks, in order: type, payer, amount, ts, raw.

    Raises:
        PaymentValidationError subclass for the first failing field
    """
    if not isinstance(payload, dict) or payload.get("type") != PAY_RECEIVED:
        raise WrongTypeError()

    payer = payload.get("payer")
    if not _is_nonempty_str(payer):
        raise InvalidPayerError()

    amount = payload.get("amount")
    if not _is_number(amount):
        raise InvalidAmountError()

    ts = payload.get("ts")
    if not _is_nonempty_str(ts):
        raise InvalidTimestampError()

    raw = payload.get("raw")
    if raw is None:
        raw = ""
    elif not isinstance(raw, str):
        raise InvalidRawError()

    return PaymentEvent(payer=payer, amount=amount, ts=ts, raw=raw)


def validate_payment(body: bytes) -> PaymentEvent:
    """Decode raw webhook bytes and validate them as a PaymentEvent.

    Raises:
        InvalidEncodingError: body is not UTF-8 JSON
        PaymentValidationError subclass: see parse_payment()
    """
    return parse_payment(_decode(body))
