"""
zkcash backend application.

Proxies the Jupiter token catalog, quote and swap-build APIs and Solana
signature status lookups behind CORS, rate limiting and fallback data.
"""

__version__ = "1.0.0"
