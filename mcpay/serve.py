"""mcpay HTTP server: app factory, read routes and process entry point.

Routes:
- GET  /          health check
- POST /mc-pay    signed payment webhook (see mcpay.webhooks.handlers)
- GET  /balance   running balance for ?user=<payer>
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from mcpay import __version__
from mcpay.config import Settings, get_settings
from mcpay.ledger import PaymentLedger
from mcpay.security.middleware import install_security_middleware
from mcpay.webhooks.handlers import register_webhook_routes

logger = logging.getLogger(__name__)


def _check_secret(settings: Settings) -> None:
    if not settings.uses_default_secret:
        return
    if settings.is_production:
        raise RuntimeError(
            "MC_WEBHOOK_SECRET is still the development placeholder; "
            "refusing to start in production"
        )
    logger.warning("MC_WEBHOOK_SECRET not set, using the insecure development secret")


def create_app(settings: Settings | None = None, ledger: PaymentLedger | None = None) -> FastAPI:
    """Build the FastAPI app.

    The webhook secret is read once here. The ledger is owned by the app
    (``app.state.ledger``); pass one in to share or inspect it in tests.
    """
    settings = settings or get_settings()
    _check_secret(settings)

    if ledger is None:
        ledger = PaymentLedger(capacity=settings.ledger_capacity)

    app = FastAPI(title="mcpay webhook", version=__version__)
    app.state.settings = settings
    app.state.ledger = ledger

    @app.get("/")
    def health():
        return {"ok": True}

    @app.get("/balance")
    def balance(user: str = ""):
        """Running balance for a payer (case-insensitive)."""
        user = user.strip()
        if not user:
            return JSONResponse({"ok": False, "error": "Missing user"}, status_code=400)
        return {"ok": True, "user": user, "balance": ledger.balance_of(user)}

    register_webhook_routes(app, ledger, settings.webhook_secret)
    install_security_middleware(app, settings)

    return app


def main() -> None:
    """Console entry point: configure logging and run uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
