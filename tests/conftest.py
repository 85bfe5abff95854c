"""Shared fixtures for the mcpay test suite."""

from __future__ import annotations

import hashlib
import hmac
from typing import Callable

import pytest

from mcpay.ledger import PaymentLedger

TEST_SECRET = "test-webhook-secret"


@pytest.fixture()
def secret() -> str:
    """Webhook secret used by signed-request tests."""
    return TEST_SECRET


@pytest.fixture()
def sign(secret: str) -> Callable[[bytes], str]:
    """Factory computing a valid X-Signature for a raw body."""

    def _sign(body: bytes, key: str | None = None) -> str:
        return hmac.new((key or secret).encode(), body, hashlib.sha256).hexdigest()

    return _sign


@pytest.fixture()
def ledger() -> PaymentLedger:
    """Fresh ledger with the default capacity."""
    return PaymentLedger()
