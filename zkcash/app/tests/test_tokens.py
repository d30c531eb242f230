"""Tests for the static fallback token data and catalog curation."""

import pytest
from pydantic import ValidationError

from zkcash.app.tokens import FALLBACK_TOKENS, curate_tokens, fallback_tokens


# ============================================================================
# Fallback Data
# ============================================================================

def test_fallback_tokens_fixed_order():
    tokens = fallback_tokens()

    assert [t["symbol"] for t in tokens] == ["SOL", "USDC", "USDT"]
    assert tokens[0] == {
        "symbol": "SOL",
        "name": "Solana",
        "mint": "So11111111111111111111111111111111111111112",
        "decimals": 9,
    }


def test_fallback_mints_are_base58_addresses():
    alphabet = set("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")
    for token in FALLBACK_TOKENS:
        assert 32 <= len(token.mint) <= 44
        assert set(token.mint) <= alphabet


def test_fallback_tokens_immutable():
    with pytest.raises(ValidationError):
        FALLBACK_TOKENS[0].symbol = "XYZ"


def test_fallback_tokens_returns_fresh_copies():
    tokens = fallback_tokens()
    tokens[0]["symbol"] = "XYZ"

    assert fallback_tokens()[0]["symbol"] == "SOL"


# ============================================================================
# Curation
# ============================================================================

def test_curate_keeps_verified_outside_allow_list():
    catalog = [{"symbol": "FOO", "tags": ["verified"]}]

    assert curate_tokens(catalog) == catalog


def test_curate_keeps_allow_listed_without_tags():
    catalog = [{"symbol": "USDC", "name": "USD Coin"}]

    assert curate_tokens(catalog) == catalog


def test_curate_allow_list_is_case_sensitive():
    catalog = [{"symbol": "msol"}, {"symbol": "mSOL"}, {"symbol": "JITOSOL"}]

    assert curate_tokens(catalog) == [{"symbol": "mSOL"}]


def test_curate_drops_unverified_and_malformed_entries():
    catalog = [
        {"symbol": "RUG", "tags": ["community"]},
        {"symbol": "ODD", "tags": "unverified"},
        "not-a-token",
        None,
        {"symbol": "WIF", "tags": None},
    ]

    assert curate_tokens(catalog) == [{"symbol": "WIF", "tags": None}]


@pytest.mark.parametrize("symbol", [["USDC"], {"ticker": "USDC"}, 7, None])
def test_curate_non_string_symbol_not_allow_listed(symbol):
    catalog = [{"symbol": symbol}, {"symbol": symbol, "tags": ["verified"]}]

    assert curate_tokens(catalog) == [{"symbol": symbol, "tags": ["verified"]}]
