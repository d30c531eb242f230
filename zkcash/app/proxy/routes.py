"""
Proxy Routes - Upstream Request Forwarding
==========================================

This module implements the public endpoints that forward requests to the
Jupiter aggregator and the Solana RPC node.

Failure Model:
--------------
1. Missing mandatory inputs end the request with 400 before any upstream call
2. Upstream non-2xx bodies are passed through verbatim with status 400
3. Transport failures (unreachable, timeout, unparseable body) become 500
   with a generic message and the cause as ``details``
4. The token list never fails: it degrades to static fallback data

Endpoints:
----------
- GET  /api/health: Liveness, independent of upstream state
- GET  /api/tokens: Curated Jupiter token catalog
- GET  /api/quote: Jupiter v6 quote
- POST /api/swap: Jupiter v6 swap transaction build
- GET  /api/tx/{sig}: Signature confirmation status
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from ..config import Settings
from ..errors import ProxyError
from ..models import HealthResponse, SwapBuildRequest, TokenListResponse, TxStatusResponse
from ..tokens import curate_tokens, fallback_tokens
from ..upstream import JupiterClient, RpcError, SolanaRpcClient

logger = logging.getLogger(__name__)

# Create router
proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings instance the application was built with."""
    return request.app.state.settings


def _get_upstream(request: Request, name: str):
    app_state = getattr(request.app.state, "app_state", None)
    client = getattr(app_state, name, None) if app_state is not None else None
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upstream client not available",
        )
    return client


def get_jupiter_client(request: Request) -> JupiterClient:
    return _get_upstream(request, "jupiter")


def get_rpc_client(request: Request) -> SolanaRpcClient:
    return _get_upstream(request, "rpc")


def describe_failure(exc: Exception) -> str:
    """Render a caught exception as diagnostic text."""
    message = str(exc)
    name = type(exc).__name__
    if not message:
        return name
    if message.startswith(name):
        return message
    return f"{name}: {message}"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def token_list(tokens, **flags) -> JSONResponse:
    """Token list envelope; unset flags are left out and entries stay untouched."""
    envelope = TokenListResponse(ok=True, tokens=tokens, **flags)
    return JSONResponse(content=envelope.model_dump(exclude_unset=True))


def pass_through(response: httpx.Response) -> JSONResponse:
    """
    Forward an upstream JSON body unchanged.

    2xx keeps status 200; any other upstream status is reported as 400 with
    the upstream error payload as the body.

    Raises:
        ValueError: Upstream body is not JSON
    """
    body = response.json()
    if response.is_success:
        return JSONResponse(content=body)
    logger.warning(f"Upstream rejected request: {response.status_code}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


# ============================================================================
# Endpoints
# ============================================================================

@proxy_router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_app_settings)):
    """Liveness probe; never touches upstream services."""
    return HealthResponse(ok=True, service=settings.SERVICE_NAME, time=utc_timestamp())


@proxy_router.get("/tokens", response_model=TokenListResponse)
async def list_tokens(jupiter: JupiterClient = Depends(get_jupiter_client)):
    """
    Curated token catalog.

    Keeps well-known symbols and anything tagged verified. Any upstream
    failure is answered with the static fallback list and ``fallback: true``;
    the status is always 200.
    """
    try:
        response = await jupiter.fetch_token_list()
        if not response.is_success:
            raise ValueError(f"token list fetch failed: {response.status_code}")
        catalog = response.json()
        if not isinstance(catalog, list):
            raise ValueError("token list is not an array")
        curated = curate_tokens(catalog)
    except (httpx.HTTPError, ValueError, TypeError) as e:
        logger.warning(f"Serving fallback token list: {describe_failure(e)}")
        return token_list(fallback_tokens(), fallback=True)

    return token_list(curated)


@proxy_router.get("/quote")
async def quote(
    inputMint: Optional[str] = Query(None),
    outputMint: Optional[str] = Query(None),
    amount: Optional[str] = Query(None),
    slippageBps: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    jupiter: JupiterClient = Depends(get_jupiter_client),
):
    """Proxy a Jupiter v6 quote (ExactIn, multi-hop routes allowed)."""
    if not inputMint or not outputMint or not amount:
        raise ProxyError(status.HTTP_400_BAD_REQUEST, "Missing params")

    try:
        response = await jupiter.get_quote(
            input_mint=inputMint,
            output_mint=outputMint,
            amount=amount,
            slippage_bps=slippageBps or settings.SLIPPAGE_BPS,
        )
        return pass_through(response)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Quote proxy failed: {describe_failure(e)}")
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Quote proxy failed",
            describe_failure(e),
        )


@proxy_router.post("/swap")
async def swap(
    body: Optional[SwapBuildRequest] = None,
    jupiter: JupiterClient = Depends(get_jupiter_client),
):
    """Proxy a Jupiter v6 swap build for a previously obtained quote."""
    if body is None or body.quoteResponse is None or not body.userPublicKey:
        raise ProxyError(status.HTTP_400_BAD_REQUEST, "Missing quoteResponse or userPublicKey")

    try:
        response = await jupiter.build_swap(
            quote_response=body.quoteResponse,
            user_public_key=body.userPublicKey,
            wrap_and_unwrap_sol=body.wrapAndUnwrapSol,
            destination_wallet=body.destinationWallet,
        )
        return pass_through(response)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Swap proxy failed: {describe_failure(e)}")
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Swap proxy failed",
            describe_failure(e),
        )


@proxy_router.get("/tx/{sig}", response_model=TxStatusResponse)
async def transaction_status(sig: str, rpc: SolanaRpcClient = Depends(get_rpc_client)):
    """Confirmation status of a signature, searching full transaction history."""
    try:
        statuses = await rpc.get_signature_statuses([sig], search_transaction_history=True)
    except (httpx.HTTPError, ValueError, RpcError) as e:
        logger.error(f"RPC status failed: {describe_failure(e)}")
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "RPC status failed",
            describe_failure(e),
        )

    value = statuses[0] if statuses else None
    return TxStatusResponse(ok=True, value=value or None)
