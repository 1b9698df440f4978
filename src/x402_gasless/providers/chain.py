"""
Read-only chain access through cached web3 clients
"""

import logging
from typing import Any, Callable

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware

from x402_gasless.networks import NetworkRegistry
from x402_gasless.providers.cache import ProviderCache

logger = logging.getLogger(__name__)


def web3_factory(registry: NetworkRegistry) -> Callable[[str], AsyncWeb3]:
    """Build AsyncWeb3 clients pointed at the registry's RPC URL for a network"""

    def create(network: str) -> AsyncWeb3:
        w3 = AsyncWeb3(AsyncHTTPProvider(registry.rpc_url(network)))
        # Polygon and other PoA chains carry oversized extraData
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        return w3

    return create


class ChainReader:
    """Node queries shared by the health check and settlement diagnostics"""

    def __init__(self, cache: ProviderCache[AsyncWeb3]) -> None:
        self._cache = cache

    @classmethod
    def for_registry(cls, registry: NetworkRegistry) -> "ChainReader":
        return cls(ProviderCache(web3_factory(registry)))

    async def test_connection(self, network: str) -> bool:
        """Return True if the network's node answers a block number query"""
        w3 = self._cache.get_or_create(network)
        try:
            block_number = await w3.eth.block_number
        except Exception as e:
            logger.error("Connection test failed for %s: %s", network, e)
            return False
        logger.debug("Connection test for %s ok at block %s", network, block_number)
        return True

    async def get_gas_price(self, network: str) -> dict[str, str | None]:
        """Current fee data as decimal strings (EIP-1559 fields are None on legacy chains)"""
        w3 = self._cache.get_or_create(network)
        gas_price = await w3.eth.gas_price
        block = await w3.eth.get_block("latest")
        base_fee = block.get("baseFeePerGas")

        max_fee = priority_fee = None
        if base_fee is not None:
            priority_fee = await w3.eth.max_priority_fee
            max_fee = base_fee * 2 + priority_fee

        return {
            "gasPrice": str(gas_price),
            "maxFeePerGas": str(max_fee) if max_fee is not None else None,
            "maxPriorityFeePerGas": str(priority_fee) if priority_fee is not None else None,
        }
