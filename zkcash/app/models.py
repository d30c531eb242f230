"""
Data Models Module

This module defines Pydantic models for request/response validation
and data serialization throughout the proxy service.

Upstream Jupiter payloads (quotes, swap transactions, catalog entries) are
deliberately not modelled: they pass through as opaque JSON.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Token Models
# ============================================================================

class TokenInfo(BaseModel):
    """Static token descriptor served when the live catalog is unavailable."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Ticker symbol")
    name: str = Field(..., description="Display name")
    mint: str = Field(..., description="Base58 SPL mint address")
    decimals: int = Field(..., description="Decimal precision of base units", ge=0)


class TokenListResponse(BaseModel):
    """Curated token list envelope; `fallback` is only present when degraded."""
    ok: bool = Field(default=True)
    tokens: List[Dict[str, Any]] = Field(..., description="Token descriptors")
    fallback: Optional[bool] = Field(None, description="Set when static data was served")


# ============================================================================
# Swap Models
# ============================================================================

class SwapBuildRequest(BaseModel):
    """
    Request body for building a swap transaction.

    Attributes:
        quoteResponse: Quote object previously returned by /api/quote (opaque)
        userPublicKey: Wallet that will sign the transaction
        wrapAndUnwrapSol: Whether native SOL is wrapped/unwrapped automatically
        destinationWallet: Optional wallet receiving the output token
    """

    model_config = ConfigDict(extra="ignore")

    quoteResponse: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Quote object returned by the quote endpoint",
    )
    userPublicKey: Optional[str] = Field(
        default=None,
        description="Base58 public key of the signing wallet",
    )
    wrapAndUnwrapSol: bool = Field(default=True)
    destinationWallet: Optional[str] = Field(default=None)


# ============================================================================
# Health / Status Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    ok: bool = Field(default=True)
    service: str = Field(..., description="Service name")
    time: str = Field(..., description="ISO-8601 UTC timestamp")


class TxStatusResponse(BaseModel):
    """Signature status envelope; `value` is null when the signature is unknown."""
    ok: bool = Field(default=True)
    value: Optional[Dict[str, Any]] = Field(None, description="RPC signature status entry")


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(None, description="Diagnostic detail, when available")
