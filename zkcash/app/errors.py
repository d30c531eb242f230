"""
Error handling for the proxy service.

Every error leaves the service as ``{"error": ..., "details": ...}``; FastAPI's
default ``{"detail": ...}`` shape is replaced by the handlers registered here.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models import ErrorResponse

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"


class ProxyError(Exception):
    """
    Raised by handlers to end a request with a structured error body.

    Attributes:
        status_code: HTTP status returned to the caller
        error: Short error message
        details: Optional diagnostic text (usually the upstream cause)
    """

    def __init__(self, status_code: int, error: str, details: Optional[Any] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


def error_response(status_code: int, error: str, details: Optional[Any] = None, headers=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers that render the error envelope."""

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        return error_response(exc.status_code, exc.error, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown path and known path with the wrong method both fall through
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return error_response(status.HTTP_404_NOT_FOUND, ROUTE_NOT_FOUND)
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", exc.errors())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
            exc_info=True,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
