"""HTTP-level fixtures.

Builds the FastAPI app from explicit Settings so tests never depend on the
process environment. Rate limiting is off unless a test builds its own app.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mcpay.config import Settings
from mcpay.serve import create_app


@pytest.fixture()
def settings(secret) -> Settings:
    return Settings(webhook_secret=secret, rate_limit="", cors_origins=["*"])


@pytest.fixture()
def app(settings, ledger):
    return create_app(settings, ledger=ledger)


@pytest.fixture()
def client(app):
    """TestClient that turns server exceptions into 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
