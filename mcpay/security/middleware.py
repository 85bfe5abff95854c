"""Security middleware for FastAPI: CORS, rate limiting.

Middleware ordering (outermost first):
1. CORS -- handles OPTIONS preflight before anything else
2. Rate limiting -- reject floods before processing
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from mcpay.config import Settings

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type", "X-Signature"]


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return the service's error shape for 429s.

    Sync on purpose: SlowAPIMiddleware calls the registered handler directly.
    """
    logger.warning("Rate limit exceeded: %s %s (%s)", request.method, request.url.path, exc.detail)
    return JSONResponse({"ok": False, "error": "Too many requests"}, status_code=429)


def install_security_middleware(app: FastAPI, settings: Settings) -> None:
    """Install rate limiting and CORS on *app*.

    Starlette wraps middleware in reverse order of registration, so CORS is
    added last to end up outermost.
    """
    if settings.rate_limit:
        limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        app.add_middleware(SlowAPIMiddleware)
        logger.info("Rate limiting enabled: %s per client", settings.rate_limit)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
    )
