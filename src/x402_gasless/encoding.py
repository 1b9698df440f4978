"""
Encoding utilities for x402 payment headers
"""

import base64
import binascii
import json
import re
from typing import Any

from x402_gasless.exceptions import DecodeError

_BASE64_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")


def encode_base64(data: str | bytes) -> str:
    """Encode data to base64"""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def decode_base64(data: str) -> str:
    """Decode base64 to string"""
    return base64.b64decode(data, validate=True).decode("utf-8")


def is_well_formed(header: Any) -> bool:
    """Cheap syntactic check of a payment header.

    Only the base64 alphabet and the length constraint are checked, so a
    ``True`` result does not mean the header decodes to a valid operation.
    """
    if not isinstance(header, str):
        return False
    return bool(_BASE64_RE.fullmatch(header)) and len(header) % 4 == 0


def encode_payment_header(record: Any) -> str:
    """Encode a payment record to a base64 header value.

    Accepts a plain dict or a pydantic model. Output is compact JSON so the
    same record always yields the same header.
    """
    if hasattr(record, "model_dump"):
        record = record.model_dump(by_alias=True)
    json_str = json.dumps(record, separators=(",", ":"), ensure_ascii=False)
    return encode_base64(json_str)


def decode_payment_header(header: str) -> dict[str, Any]:
    """Decode a base64 payment header into a JSON object.

    Raises:
        DecodeError: If the header is not strict base64, not UTF-8 JSON, or
            the JSON value is not an object
    """
    if not is_well_formed(header):
        raise DecodeError("Failed to decode payment header: invalid base64 encoding")

    try:
        json_str = decode_base64(header)
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DecodeError(f"Failed to decode payment header: {e}") from e

    try:
        data = json.loads(json_str)
    except ValueError as e:
        raise DecodeError(f"Failed to decode payment header: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError("Failed to decode payment header: expected a JSON object")
    return data


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string to bytes"""
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)
