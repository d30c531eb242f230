"""
Pipeline Package
================

Cross-cutting processing applied to every inbound request before it reaches
a route handler.

Order (outermost first):
------------------------
1. RequestContextMiddleware - tracing id + access log line
2. SecurityHeadersMiddleware - hardening response headers
3. OriginGuardMiddleware - reject origins outside CORS_ORIGINS
4. CORSMiddleware - CORS response headers and preflight for allowed origins
5. BodySizeLimitMiddleware - 413 above MAX_BODY_BYTES
6. GZipMiddleware - compress responses when the caller accepts gzip
7. RateLimitMiddleware - per-caller moving-window rate limit, every path counted
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from ..config import Settings
from .middleware import (
    BodySizeLimitMiddleware,
    OriginGuardMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)
from .ratelimit import RateLimitMiddleware, client_address_key, create_limiter

__all__ = ["install_pipeline", "client_address_key", "create_limiter", "RateLimitMiddleware"]


def install_pipeline(app: FastAPI, settings: Settings) -> None:
    """Register the request pipeline on ``app``; middleware added last runs first."""
    limiter = create_limiter(settings)
    app.state.limiter = limiter
    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter,
        limit=settings.rate_limit,
        key_func=client_address_key(settings.TRUSTED_PROXY_HOPS),
    )

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.MAX_BODY_BYTES)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.cors_origins_list)

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(RequestContextMiddleware)
