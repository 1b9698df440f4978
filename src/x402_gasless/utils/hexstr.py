"""
Hex string and quantity helpers shared by UserOperation parsing and RPC encoding
"""

import re
from typing import Any

EMPTY_HEX = "0x"

UINT256_MAX = 2**256 - 1
UINT256_MAX_DIGITS = len(str(UINT256_MAX))

_HEX_BODY_RE = re.compile(r"[0-9a-fA-F]*")
_DECIMAL_RE = re.compile(r"[0-9]+")


def is_hex_string(value: Any, allow_empty: bool = False) -> bool:
    """Return True for a ``0x``-prefixed string with an even number of hex digits.

    ``"0x"`` itself is only accepted when *allow_empty* is set.
    """
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    body = value[2:]
    if not body and not allow_empty:
        return False
    return len(body) % 2 == 0 and bool(_HEX_BODY_RE.fullmatch(body))


def parse_quantity(value: Any) -> int:
    """Parse a uint256 from an int, a decimal string or a 0x quantity.

    Raises:
        ValueError: If the value is not an integer in one of those forms, or
            falls outside 0..2**256-1
    """
    if isinstance(value, bool):
        raise ValueError("expected an integer quantity, got a boolean")

    quantity = None
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            body = text[2:]
            if body and _HEX_BODY_RE.fullmatch(body):
                quantity = int(body, 16)
        elif _DECIMAL_RE.fullmatch(text):
            if len(text.lstrip("0")) > UINT256_MAX_DIGITS:
                raise ValueError("quantity exceeds uint256")
            quantity = int(text.lstrip("0") or "0")

    if quantity is None:
        raise ValueError(f"expected a non-negative integer quantity, got {value!r}")
    if quantity < 0:
        raise ValueError("quantity must be non-negative")
    if quantity > UINT256_MAX:
        raise ValueError("quantity exceeds uint256")
    return quantity


def to_quantity(value: int) -> str:
    """Encode an integer as a JSON-RPC hex quantity"""
    return hex(value)
