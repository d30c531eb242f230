"""Jupiter aggregator client.

Thin wrapper over a shared httpx.AsyncClient. Responses are returned as-is so
the proxy handlers can forward upstream bodies and statuses verbatim.
API docs: https://station.jup.ag/docs/apis/swap-api
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

# Always search multi-hop routes, exact input amount
QUOTE_SWAP_MODE = "ExactIn"
QUOTE_ONLY_DIRECT_ROUTES = "false"


class JupiterClient:
    """Jupiter token catalog, quote and swap-build endpoints."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        quote_api_url: str,
        token_list_url: str,
    ):
        self.http = http
        self.base_url = quote_api_url.rstrip("/")
        self.token_list_url = token_list_url

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    async def fetch_token_list(self) -> httpx.Response:
        """Fetch the full token catalog, bypassing any intermediary cache."""
        headers = self._get_headers()
        headers["Cache-Control"] = "no-cache"
        return await self.http.get(self.token_list_url, headers=headers)

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: str,
        slippage_bps: Any,
    ) -> httpx.Response:
        """Request a swap quote.

        Args:
            input_mint: Mint of the token being sold
            output_mint: Mint of the token being bought
            amount: Input amount in base units, forwarded as given
            slippage_bps: Slippage tolerance in basis points
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(slippage_bps),
            "swapMode": QUOTE_SWAP_MODE,
            "onlyDirectRoutes": QUOTE_ONLY_DIRECT_ROUTES,
        }
        headers = self._get_headers()
        headers["Cache-Control"] = "no-cache"
        logger.debug(f"Jupiter quote {input_mint} -> {output_mint} amount={amount}")
        return await self.http.get(f"{self.base_url}/quote", params=params, headers=headers)

    async def build_swap(
        self,
        quote_response: Mapping[str, Any],
        user_public_key: str,
        wrap_and_unwrap_sol: bool = True,
        destination_wallet: Optional[str] = None,
    ) -> httpx.Response:
        """Ask Jupiter to build an unsigned swap transaction for a quote."""
        payload: Dict[str, Any] = {
            "quoteResponse": quote_response,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": wrap_and_unwrap_sol,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": "auto",
        }
        if destination_wallet is not None:
            payload["destinationWallet"] = destination_wallet

        return await self.http.post(
            f"{self.base_url}/swap",
            json=payload,
            headers=self._get_headers(),
        )
