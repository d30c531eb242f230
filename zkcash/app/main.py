"""
FastAPI Application Factory
===========================

Entry point for the zkcash swap proxy backend, a small service that sits
between the web wallet frontend and third-party Solana infrastructure.

Architecture:
    Browser / clients → zkcash backend (this service) → Jupiter API / Solana RPC

Routers:
    - /api/health   : Health check endpoint
    - /api/tokens   : Curated token catalog (falls back to static data)
    - /api/quote    : Jupiter v6 quote proxy
    - /api/swap     : Jupiter v6 swap-transaction proxy
    - /api/tx/{sig} : Transaction confirmation status via RPC

Environment Variables:
    - PORT: Listening port (default: 3000)
    - RPC_URL: Solana RPC URL (default: https://api.mainnet-beta.solana.com)
    - SLIPPAGE_BPS: Default slippage in basis points (default: 50)
    - CORS_ORIGINS: Comma-separated allowed origins (e.g., "https://app.zkcash.io")
    - TRUSTED_PROXY_HOPS: Reverse proxies trusted for X-Forwarded-For (default: 1)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn zkcash.app.main:create_app --factory --reload --port 3000

    Production:
        zkcash-backend

    With custom log level:
        LOG_LEVEL=DEBUG zkcash-backend
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .config import Settings, get_settings
from .errors import register_error_handlers
from .pipeline import install_pipeline
from .proxy import proxy_router
from .upstream import JupiterClient, SolanaRpcClient, create_http_client


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


class AppState:
    """
    Application state container.

    Holds the long-lived upstream handles shared by every request. Handles
    passed to the factory are used as-is; missing ones are built at startup.
    """
    def __init__(
        self,
        jupiter: Optional[JupiterClient] = None,
        rpc: Optional[SolanaRpcClient] = None,
    ):
        self.jupiter = jupiter
        self.rpc = rpc


def build_lifespan(settings: Settings):
    """Create the lifespan manager that owns the shared HTTP client."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = logging.getLogger("zkcash.main")
        app_state: AppState = app.state.app_state

        http_client = None
        if app_state.jupiter is None or app_state.rpc is None:
            http_client = create_http_client(settings.UPSTREAM_TIMEOUT_SECONDS)
            if app_state.jupiter is None:
                app_state.jupiter = JupiterClient(
                    http_client,
                    quote_api_url=settings.jupiter_quote_api_str,
                    token_list_url=settings.JUPITER_TOKEN_LIST_URL,
                )
            if app_state.rpc is None:
                app_state.rpc = SolanaRpcClient(http_client, rpc_url=settings.RPC_URL)

        logger.info(
            "Starting swap proxy",
            extra={
                "rpc_url": settings.RPC_URL,
                "slippage_bps": settings.SLIPPAGE_BPS,
                "cors_origins": settings.cors_origins_list,
            }
        )

        yield

        logger.info("Shutting down swap proxy")
        if http_client is not None:
            await http_client.aclose()

    return lifespan


def create_app(
    settings: Optional[Settings] = None,
    jupiter: Optional[JupiterClient] = None,
    rpc: Optional[SolanaRpcClient] = None,
) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management (shared upstream HTTP client)
        - Request pipeline (origin guard, CORS, body limit, gzip, rate limit)
        - Route handlers
        - Exception handlers

    Args:
        settings: Configuration; loaded from the environment when omitted
        jupiter: Pre-built Jupiter client (tests)
        rpc: Pre-built Solana RPC client (tests)

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="zkcash backend",
        description="Jupiter and Solana RPC proxy for the zkcash wallet",
        version="1.0.0",
        lifespan=build_lifespan(settings),
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.app_state = AppState(jupiter=jupiter, rpc=rpc)

    register_error_handlers(app)
    install_pipeline(app, settings)

    app.include_router(proxy_router, prefix="/api", tags=["Proxy"])

    return app


def run() -> None:
    """Console entry point: load settings, configure logging and serve."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logging.getLogger("zkcash.main").info(f"zkcash backend listening on :{settings.PORT}")

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=False,
        access_log=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
