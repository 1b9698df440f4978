"""
x402-gasless utility functions
"""

from x402_gasless.utils.hexstr import (
    EMPTY_HEX,
    UINT256_MAX,
    is_hex_string,
    parse_quantity,
    to_quantity,
)

__all__ = [
    "EMPTY_HEX",
    "UINT256_MAX",
    "is_hex_string",
    "parse_quantity",
    "to_quantity",
]
