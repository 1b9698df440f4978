"""
Network registry: chain IDs, Alchemy endpoints and canonical USDC per network
"""

from dataclasses import dataclass
from typing import Dict, Iterable

from x402_gasless.exceptions import UnsupportedNetworkError
from x402_gasless.tokens import USDC, TokenRegistry

ALCHEMY_URL_TEMPLATE = "https://{subdomain}.g.alchemy.com/v2/{api_key}"


@dataclass(frozen=True)
class NetworkInfo:
    """Static description of a supported chain"""

    network: str
    chain_id: int
    name: str
    is_testnet: bool
    alchemy_subdomain: str


NETWORKS: Dict[str, NetworkInfo] = {
    info.network: info
    for info in (
        NetworkInfo("base-sepolia", 84532, "Base Sepolia", True, "base-sepolia"),
        NetworkInfo("base-mainnet", 8453, "Base", False, "base-mainnet"),
        NetworkInfo("eth-sepolia", 11155111, "Ethereum Sepolia", True, "eth-sepolia"),
        NetworkInfo("eth-mainnet", 1, "Ethereum", False, "eth-mainnet"),
        NetworkInfo("polygon-mainnet", 137, "Polygon", False, "polygon-mainnet"),
        NetworkInfo("arbitrum-mainnet", 42161, "Arbitrum", False, "arb-mainnet"),
        NetworkInfo("optimism-mainnet", 10, "Optimism", False, "opt-mainnet"),
    )
}


class NetworkRegistry:
    """Read-only view over the supported networks.

    URLs embed the Alchemy API key, so the registry is built from the
    facilitator configuration rather than held as module state.
    """

    def __init__(self, api_key: str, networks: Iterable[NetworkInfo] | None = None) -> None:
        self._api_key = api_key
        catalog = NETWORKS.values() if networks is None else networks
        self._networks: Dict[str, NetworkInfo] = {info.network: info for info in catalog}

    def is_supported(self, network: str) -> bool:
        return network in self._networks

    def get(self, network: str) -> NetworkInfo:
        """Get the network description

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        info = self._networks.get(network)
        if info is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return info

    def chain_id(self, network: str) -> int:
        return self.get(network).chain_id

    def canonical_asset(self, network: str) -> str:
        """USDC contract address for *network*"""
        self.get(network)
        return TokenRegistry.get_token(network, USDC).address

    def rpc_url(self, network: str) -> str:
        info = self.get(network)
        return ALCHEMY_URL_TEMPLATE.format(subdomain=info.alchemy_subdomain, api_key=self._api_key)

    def bundler_url(self, network: str) -> str:
        # Alchemy serves the bundler and paymaster methods from the node endpoint
        return self.rpc_url(network)

    def supported_networks(self) -> list[str]:
        return list(self._networks)

