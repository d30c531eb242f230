"""
Upstream Package
================

Clients for the third-party services the proxy forwards to.

Main Components:
----------------
- jupiter.py: Jupiter token catalog, v6 quote and swap-build client
- solana_rpc.py: Solana JSON-RPC client (signature status lookups)

Both clients wrap one shared httpx.AsyncClient created at startup.
"""

import httpx

from .jupiter import JupiterClient
from .solana_rpc import RpcError, SolanaRpcClient

__all__ = ["JupiterClient", "RpcError", "SolanaRpcClient", "create_http_client"]


def create_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """Build the pooled HTTP client shared by all upstream clients."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds, connect=10.0),
        headers={"User-Agent": "zkcash-backend"},
    )
