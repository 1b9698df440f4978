"""
Token registry - USDC contracts for every supported network
"""

from dataclasses import dataclass

from x402_gasless.exceptions import UnknownTokenError

USDC = "USDC"


@dataclass
class TokenInfo:
    """Token information"""

    address: str
    decimals: int
    name: str
    symbol: str
    version: str = "2"


def _usdc(address: str) -> dict[str, TokenInfo]:
    return {USDC: TokenInfo(address=address, decimals=6, name="USD Coin", symbol=USDC)}


class TokenRegistry:
    """Token registry"""

    _tokens: dict[str, dict[str, TokenInfo]] = {
        "base-sepolia": _usdc("0x036CbD53842c5426634e7929541eC2318f3dCF7e"),
        "base-mainnet": _usdc("0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"),
        "eth-sepolia": _usdc("0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238"),
        "eth-mainnet": _usdc("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
        "polygon-mainnet": _usdc("0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"),
        "arbitrum-mainnet": _usdc("0xaf88d065e77c8cC2239327C5EDb3A432268e5831"),
        "optimism-mainnet": _usdc("0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85"),
    }

    @classmethod
    def get_token(cls, network: str, symbol: str) -> TokenInfo:
        """Get token information for specified network and symbol

        Raises:
            UnknownTokenError: If token does not exist
        """
        tokens = cls._tokens.get(network, {})
        token = tokens.get(symbol.upper())
        if token is None:
            raise UnknownTokenError(f"{symbol} contract not configured for network: {network}")
        return token

