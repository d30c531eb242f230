"""Minimal Solana JSON-RPC client over a shared httpx.AsyncClient."""

import itertools
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

class RpcError(Exception):
    """JSON-RPC level failure (error object or unexpected payload)."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data

    def __str__(self) -> str:
        message = super().__str__()
        if self.code is not None:
            return f"RpcError {self.code}: {message}"
        return f"RpcError: {message}"


class SolanaRpcClient:
    """
    Long-lived RPC handle shared by all requests.

    Holds no per-request state apart from the request id counter, so it is
    safe to use from concurrent handlers.
    """

    def __init__(self, http: httpx.AsyncClient, rpc_url: str):
        self.http = http
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)

    async def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Perform one JSON-RPC call and return its ``result``.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx response
            ValueError: Response body is not JSON
            RpcError: Response carries an error object or no result
        """
        response = await self.http.post(
            self.rpc_url,
            json={
                "jsonrpc": "2.0",
                "id": next(self._ids),
                "method": method,
                "params": params or [],
            },
        )
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, dict):
            raise RpcError(f"Unexpected {method} response: {data!r}")

        if data.get("error"):
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message", "unknown error"),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(str(error))

        if "result" not in data:
            raise RpcError(f"Missing result in {method} response")

        return data["result"]

    async def get_signature_statuses(
        self,
        signatures: Sequence[str],
        search_transaction_history: bool = False,
    ) -> List[Optional[Dict[str, Any]]]:
        """Return the status entries (or None) for each signature, in order."""
        result = await self.call(
            "getSignatureStatuses",
            [list(signatures), {"searchTransactionHistory": search_transaction_history}],
        )
        if not isinstance(result, dict) or not isinstance(result.get("value"), list):
            raise RpcError(f"Unexpected getSignatureStatuses result: {result!r}")

        statuses = result["value"]
        for entry in statuses:
            if entry is not None and not isinstance(entry, dict):
                raise RpcError(f"Unexpected signature status entry: {entry!r}")
        return statuses
