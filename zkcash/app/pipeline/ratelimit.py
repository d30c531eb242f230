"""
Per-caller rate limiting.

A single slowapi Limiter (moving-window strategy, in-memory storage) backs one
application-wide limit (160 requests per 10 seconds by default) shared across
all routes. Callers are identified by network address, resolved through a
configurable number of trusted reverse-proxy hops.

The limit is enforced by RateLimitMiddleware for every request that reaches
it, matched route or not, so unknown paths count against the same window.
"""

import logging
import math
import time
from typing import Callable, List

from fastapi import Request, status
from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..config import Settings
from ..errors import error_response

logger = logging.getLogger(__name__)


def forwarded_chain(request: Request) -> List[str]:
    """
    Addresses seen for this request, nearest first.

    The socket peer comes first, followed by X-Forwarded-For entries from
    right (added by the nearest proxy) to left (claimed by the client).
    """
    chain = [get_remote_address(request)]
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        chain.extend(reversed(hops))
    return chain


def client_address_key(trusted_hops: int) -> Callable[[Request], str]:
    """
    Build a slowapi key function trusting ``trusted_hops`` proxies.

    With 0 hops the socket peer is used; with N hops the Nth forwarded entry
    from the right, or the leftmost entry when the header is shorter.
    """

    def key_func(request: Request) -> str:
        chain = forwarded_chain(request)
        return chain[min(trusted_hops, len(chain) - 1)]

    return key_func


def create_limiter(settings: Settings) -> Limiter:
    """Build the Limiter for one application instance (in-memory storage)."""
    return Limiter(
        key_func=client_address_key(settings.TRUSTED_PROXY_HOPS),
        strategy="moving-window",
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Count every request against the caller's window and answer 429 once
    the window is full.

    Successful responses carry X-RateLimit-Limit, X-RateLimit-Remaining and
    X-RateLimit-Reset; rejections add Retry-After.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: Limiter,
        limit: str,
        key_func: Callable[[Request], str],
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.key_func = key_func
        self.item: RateLimitItem = parse(limit)

    def _headers(self, key: str) -> dict:
        reset_time, remaining = self.limiter.limiter.get_window_stats(self.item, key)
        return {
            "X-RateLimit-Limit": str(self.item.amount),
            "X-RateLimit-Remaining": str(max(remaining, 0)),
            "X-RateLimit-Reset": str(int(reset_time)),
        }

    async def dispatch(self, request: Request, call_next):
        key = self.key_func(request)

        if not self.limiter.limiter.hit(self.item, key):
            headers = self._headers(key)
            retry_after = max(1, math.ceil(int(headers["X-RateLimit-Reset"]) - time.time()))
            headers["Retry-After"] = str(retry_after)
            logger.warning(f"Rate limit exceeded for {key}")
            return error_response(
                status.HTTP_429_TOO_MANY_REQUESTS,
                f"Rate limit exceeded: {self.item}",
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(self._headers(key))
        return response
