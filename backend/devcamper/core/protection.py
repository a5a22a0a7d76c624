# devcamper/core/protection.py
"""
Request hardening: per-client rate limiting (slowapi), a cap on request
body size and a set of security response headers.
"""
import logging

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from devcamper.config import Settings
from devcamper.core.errors import error_response

logger = logging.getLogger("uvicorn.error")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}
HSTS = "max-age=15552000; includeSubDomains"


def build_limiter(settings: Settings) -> Limiter:
    """
    One limiter per app, keyed by client IP, with in-memory counters.
    The limit is application wide: every route draws on the same budget.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )


# SlowAPIMiddleware calls this synchronously, so it must not be a coroutine.
def rate_limit_exceeded(request: Request, exc: RateLimitExceeded):
    logger.warning("[rate-limit] %s %s (%s)", get_remote_address(request), request.url.path, exc.detail)
    return error_response(429, "Too many requests, please try again later")


def install_protection(app: FastAPI, settings: Settings) -> None:
    """
    Attach the limiter, body size cap and security headers to app.

    Call before CORSMiddleware is added so CORS stays the outermost layer.
    """
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
    app.add_middleware(SlowAPIMiddleware)

    max_body = settings.max_body_bytes

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length is not None and length.isdigit() and int(length) > max_body:
            return error_response(413, f"Request body exceeds {max_body} bytes")
        return await call_next(request)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if settings.is_production:
            response.headers.setdefault("Strict-Transport-Security", HSTS)
        return response
