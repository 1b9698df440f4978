"""
UserOperation parsing and structural validation
"""

from collections.abc import Mapping
from typing import Any

import pydantic
from eth_abi import encode as abi_encode
from eth_utils import keccak

from x402_gasless.abi import USER_OP_PACK_TYPES
from x402_gasless.encoding import decode_payment_header, hex_to_bytes
from x402_gasless.exceptions import StructuralError
from x402_gasless.types import UserOperation
from x402_gasless.utils.hexstr import EMPTY_HEX, is_hex_string, parse_quantity

REQUIRED_FIELDS = (
    "sender",
    "nonce",
    "callData",
    "callGasLimit",
    "verificationGasLimit",
    "preVerificationGas",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "signature",
)

HEX_FIELDS = ("sender", "callData", "signature")
OPTIONAL_HEX_FIELDS = ("initCode", "paymasterAndData")
QUANTITY_FIELDS = (
    "nonce",
    "callGasLimit",
    "verificationGasLimit",
    "preVerificationGas",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
)


def validate_structure(record: Any) -> UserOperation:
    """Validate a decoded payment record and build a UserOperation.

    The record is only read, never modified.

    Raises:
        StructuralError: On the first missing or malformed field, with
            ``field`` set to its wire name
    """
    if not isinstance(record, Mapping):
        raise StructuralError("<root>", "Invalid UserOp: expected a JSON object")

    for field in REQUIRED_FIELDS:
        if field not in record:
            raise StructuralError(field, f"Invalid UserOp: missing required field '{field}'")

    for field in HEX_FIELDS:
        if not is_hex_string(record[field]):
            raise StructuralError(field, f"Invalid UserOp: '{field}' must be a hex string")

    for field in OPTIONAL_HEX_FIELDS:
        value = record.get(field, EMPTY_HEX)
        if value != EMPTY_HEX and not is_hex_string(value):
            raise StructuralError(
                field, f"Invalid UserOp: '{field}' must be a hex string or '0x'"
            )

    for field in QUANTITY_FIELDS:
        try:
            parse_quantity(record[field])
        except ValueError as e:
            raise StructuralError(
                field, f"Invalid UserOp: '{field}' must be a non-negative integer ({e})"
            ) from e

    known = {k: record[k] for k in REQUIRED_FIELDS + OPTIONAL_HEX_FIELDS if k in record}
    try:
        return UserOperation.model_validate(known)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else "<root>"
        raise StructuralError(field, f"Invalid UserOp: '{field}' {error['msg']}") from e


def parse_user_operation(payment_header: str) -> UserOperation:
    """Decode a payment header and validate the UserOperation it carries"""
    return validate_structure(decode_payment_header(payment_header))


def user_op_tag(operation: UserOperation) -> str:
    """Short identifier for log lines"""
    return f"{operation.sender[:10]}...{operation.nonce}"


def compute_user_op_hash(operation: UserOperation, entry_point: str, chain_id: int) -> str:
    """Compute the EntryPoint v0.6 userOpHash.

    Requires ``sender`` to be a 20-byte address; eth_abi raises otherwise.
    """
    packed = abi_encode(
        USER_OP_PACK_TYPES,
        [
            operation.sender,
            operation.nonce,
            keccak(hex_to_bytes(operation.init_code)),
            keccak(hex_to_bytes(operation.call_data)),
            operation.call_gas_limit,
            operation.verification_gas_limit,
            operation.pre_verification_gas,
            operation.max_fee_per_gas,
            operation.max_priority_fee_per_gas,
            keccak(hex_to_bytes(operation.paymaster_and_data)),
        ],
    )
    digest = keccak(
        abi_encode(["bytes32", "address", "uint256"], [keccak(packed), entry_point, chain_id])
    )
    return "0x" + digest.hex()
