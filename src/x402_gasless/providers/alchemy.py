"""
Alchemy Gas Manager and bundler clients
"""

import logging
from typing import Any

import httpx

from x402_gasless.exceptions import SponsorshipError, SubmissionError
from x402_gasless.networks import NetworkRegistry
from x402_gasless.providers.base import BundlerProvider, SponsorshipProvider
from x402_gasless.providers.jsonrpc import JsonRpcClient, JsonRpcError
from x402_gasless.types import UserOperation

logger = logging.getLogger(__name__)

METHOD_REQUEST_PAYMASTER = "alchemy_requestGasAndPaymasterAndData"
METHOD_SEND_USER_OPERATION = "eth_sendUserOperation"
METHOD_GET_USER_OPERATION_RECEIPT = "eth_getUserOperationReceipt"


class AlchemyGasManager(SponsorshipProvider):
    """Sponsors operations through an Alchemy Gas Manager policy"""

    def __init__(self, registry: NetworkRegistry, rpc: JsonRpcClient, entry_point: str) -> None:
        self._registry = registry
        self._rpc = rpc
        self._entry_point = entry_point

    async def sponsor(self, operation: UserOperation, policy_id: str, network: str) -> str | None:
        url = self._registry.rpc_url(network)
        params = [
            {
                "policyId": policy_id,
                "entryPoint": self._entry_point,
                "userOperation": operation.to_rpc_dict(),
            }
        ]

        logger.debug("Requesting paymaster data: network=%s policy=%s...", network, policy_id[:8])
        try:
            result = await self._rpc.call(url, METHOD_REQUEST_PAYMASTER, params)
        except JsonRpcError as e:
            raise SponsorshipError(f"Alchemy Gas Manager error: {e}") from e
        except httpx.HTTPError as e:
            raise SponsorshipError(f"Failed to get paymaster data: {e}") from e

        if not isinstance(result, dict):
            raise SponsorshipError("Alchemy Gas Manager returned no sponsorship data")
        return result.get("paymasterAndData")


class AlchemyBundler(BundlerProvider):
    """Submits operations to the Alchemy bundler and reads their receipts"""

    def __init__(self, registry: NetworkRegistry, rpc: JsonRpcClient, entry_point: str) -> None:
        self._registry = registry
        self._rpc = rpc
        self._entry_point = entry_point

    async def submit(self, operation: UserOperation, network: str) -> str:
        url = self._registry.bundler_url(network)

        logger.debug("Submitting UserOp to bundler: network=%s", network)
        try:
            result = await self._rpc.call(
                url, METHOD_SEND_USER_OPERATION, [operation.to_rpc_dict(), self._entry_point]
            )
        except JsonRpcError as e:
            raise SubmissionError(f"Bundler error: {e}") from e
        except httpx.HTTPError as e:
            raise SubmissionError(f"Failed to submit UserOp: {e}") from e

        if not isinstance(result, str) or not result:
            raise SubmissionError("Bundler returned an invalid userOp hash")
        return result

    async def poll_receipt(self, user_op_hash: str, network: str) -> dict[str, Any] | None:
        url = self._registry.bundler_url(network)
        result = await self._rpc.call(url, METHOD_GET_USER_OPERATION_RECEIPT, [user_op_hash])
        if result is None:
            return None
        if not isinstance(result, dict):
            raise JsonRpcError("Bundler returned an invalid receipt payload")
        return result
