"""
Static token data.

FALLBACK_TOKENS is served by /api/tokens whenever the live Jupiter catalog
cannot be fetched. CURATED_SYMBOLS are always kept from the live catalog,
verified or not.
"""

from typing import Any, Dict, Iterable, List, Tuple

from .models import TokenInfo

# Solana mainnet mints
FALLBACK_TOKENS: Tuple[TokenInfo, ...] = (
    # Native SOL (wrapped mint)
    TokenInfo(symbol="SOL", name="Solana", mint="So11111111111111111111111111111111111111112", decimals=9),
    TokenInfo(symbol="USDC", name="USD Coin", mint="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", decimals=6),
    TokenInfo(symbol="USDT", name="Tether USD", mint="Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", decimals=6),
)

CURATED_SYMBOLS = frozenset(
    {"SOL", "USDC", "USDT", "mSOL", "JitoSOL", "bSOL", "WIF", "BONK"}
)

VERIFIED_TAG = "verified"


def fallback_tokens() -> List[Dict[str, Any]]:
    """Return the static token list as JSON-ready dicts, in fixed order."""
    return [token.model_dump() for token in FALLBACK_TOKENS]


def curate_tokens(catalog: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Filter the full catalog down to well-known or verified tokens.

    Entries are kept verbatim and in upstream order. Non-object entries are
    skipped.
    """
    curated = []
    for token in catalog:
        if not isinstance(token, dict):
            continue
        tags = token.get("tags")
        if not isinstance(tags, list):
            tags = []
        symbol = token.get("symbol")
        if (isinstance(symbol, str) and symbol in CURATED_SYMBOLS) or VERIFIED_TAG in tags:
            curated.append(token)
    return curated
