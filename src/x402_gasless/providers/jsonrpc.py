"""
Minimal async JSON-RPC 2.0 client over httpx
"""

import itertools
import logging
from typing import Any

import httpx

from x402_gasless.exceptions import X402Error

logger = logging.getLogger(__name__)


class JsonRpcError(X402Error):
    """Raised when a JSON-RPC endpoint answers with an error object"""

    def __init__(self, message: str, code: int | None = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class JsonRpcClient:
    """
    Shared JSON-RPC transport for Alchemy node, bundler and paymaster methods.

    The underlying httpx client is created on first use and reused until
    ``close`` is called.
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._timeout = timeout
        self._http_client = http_client
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(headers=self._headers, timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def call(self, url: str, method: str, params: list[Any]) -> Any:
        """
        Invoke *method* at *url* and return its ``result``.

        Raises:
            httpx.HTTPError: On transport failures and non-2xx responses
            JsonRpcError: If the response carries an ``error`` object or is not JSON-RPC
        """
        client = await self._get_client()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        response = await client.post(url, json=payload)
        if response.status_code >= 400:
            logger.error("JSON-RPC %s HTTP %d: %s", method, response.status_code, response.text)
            response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise JsonRpcError(f"Invalid JSON-RPC response for {method}") from e
        if not isinstance(data, dict):
            raise JsonRpcError(f"Invalid JSON-RPC response for {method}")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise JsonRpcError(
                    str(error.get("message") or "unknown error"),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise JsonRpcError(str(error))
        return data.get("result")
