"""
Tests for the network and token registries.
"""

import pytest

from x402_gasless.exceptions import UnknownTokenError, UnsupportedNetworkError
from x402_gasless.networks import NetworkInfo, NetworkRegistry
from x402_gasless.tokens import TokenRegistry

API_KEY = "test-alchemy-key-0123456789abcdef"


class TestNetworkRegistry:
    def test_supported_networks(self, registry):
        assert registry.supported_networks() == [
            "base-sepolia",
            "base-mainnet",
            "eth-sepolia",
            "eth-mainnet",
            "polygon-mainnet",
            "arbitrum-mainnet",
            "optimism-mainnet",
        ]

    def test_chain_ids(self, registry):
        assert registry.chain_id("base-sepolia") == 84532
        assert registry.chain_id("base-mainnet") == 8453
        assert registry.chain_id("optimism-mainnet") == 10

    def test_rpc_url_embeds_key(self, registry):
        assert registry.rpc_url("arbitrum-mainnet") == (
            f"https://arb-mainnet.g.alchemy.com/v2/{API_KEY}"
        )
        assert registry.bundler_url("arbitrum-mainnet") == registry.rpc_url("arbitrum-mainnet")

    def test_canonical_asset(self, registry):
        assert registry.canonical_asset("base-mainnet") == (
            "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
        )

    def test_unsupported_network(self, registry):
        assert registry.is_supported("solana-mainnet") is False
        with pytest.raises(UnsupportedNetworkError, match="Unsupported network: solana-mainnet"):
            registry.rpc_url("solana-mainnet")

    def test_custom_catalog(self):
        info = NetworkInfo("base-sepolia", 84532, "Base Sepolia", True, "base-sepolia")
        registry = NetworkRegistry(API_KEY, networks=[info])
        assert registry.supported_networks() == ["base-sepolia"]
        assert registry.get("base-sepolia") is info


class TestTokenRegistry:
    def test_usdc_per_network(self):
        token = TokenRegistry.get_token("eth-mainnet", "usdc")
        assert token.address == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
        assert token.decimals == 6

    def test_unknown_token(self):
        with pytest.raises(UnknownTokenError):
            TokenRegistry.get_token("eth-mainnet", "DAI")

