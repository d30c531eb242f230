"""Inbound request middleware: origin guard, body limit, headers, tracing."""

import logging
import secrets
import time
from typing import Iterable

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..errors import error_response

access_logger = logging.getLogger("zkcash.access")

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


def new_request_id() -> str:
    """Short URL-safe random id (8 characters)."""
    return secrets.token_urlsafe(6)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with a tracing id and write one access log line."""

    async def dispatch(self, request: Request, call_next):
        request_id = new_request_id()
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        access_logger.info(
            f"[{request_id}] {request.method} {request.url.path} {response.status_code} "
            f"{response.headers.get('content-length', '-')} - {elapsed_ms:.3f} ms",
            extra={"request_id": request_id},
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach a fixed set of hardening headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Reject cross-origin requests from origins outside the allow-list.

    Requests without an Origin header (curl, server-to-server) pass through.
    Matching is exact; there are no wildcards. Allowed requests still get
    their CORS response headers from Starlette's CORSMiddleware further in.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is not None and origin not in self.allowed_origins:
            access_logger.warning(f"Rejected request from origin {origin}")
            return error_response(status.HTTP_403_FORBIDDEN, f"Not allowed by CORS: {origin}")
        return await call_next(request)


class PayloadTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_bytes`` before parsing.

    Declared Content-Length is checked up front. Bodies without one are
    buffered up to the limit and replayed to the application.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length")

        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                await self._reject(scope, receive, send, status.HTTP_400_BAD_REQUEST, "Invalid Content-Length")
                return
            if declared > self.max_body_bytes:
                await self._reject(scope, receive, send, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Payload too large")
                return
            await self.app(scope, receive, send)
            return

        try:
            messages = await self._buffer(receive)
        except PayloadTooLarge:
            await self._reject(scope, receive, send, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Payload too large")
            return

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _buffer(self, receive: Receive) -> list:
        messages = []
        total = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            total += len(message.get("body", b""))
            if total > self.max_body_bytes:
                raise PayloadTooLarge()
            if not message.get("more_body", False):
                break
        return messages

    async def _reject(self, scope: Scope, receive: Receive, send: Send, status_code: int, error: str) -> None:
        response = error_response(status_code, error)
        await response(scope, receive, send)
