"""
Sponsorship, bundler and chain providers
"""

from x402_gasless.providers.alchemy import AlchemyBundler, AlchemyGasManager
from x402_gasless.providers.base import BundlerProvider, SponsorshipProvider
from x402_gasless.providers.cache import ProviderCache
from x402_gasless.providers.chain import ChainReader, web3_factory
from x402_gasless.providers.jsonrpc import JsonRpcClient, JsonRpcError

__all__ = [
    "AlchemyBundler",
    "AlchemyGasManager",
    "BundlerProvider",
    "SponsorshipProvider",
    "ProviderCache",
    "ChainReader",
    "web3_factory",
    "JsonRpcClient",
    "JsonRpcError",
]
