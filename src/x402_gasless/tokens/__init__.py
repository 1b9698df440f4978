"""
Token registry
"""

from x402_gasless.tokens.registry import USDC, TokenInfo, TokenRegistry

__all__ = ["USDC", "TokenInfo", "TokenRegistry"]
