"""
Proxy Package
=============

Public /api endpoints that forward validated requests to Jupiter and the
Solana RPC node.

Main Components:
----------------
- routes.py: FastAPI router with the health, tokens, quote, swap and tx endpoints

Usage:
------
    from zkcash.app.proxy import proxy_router
    app.include_router(proxy_router, prefix="/api")
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
