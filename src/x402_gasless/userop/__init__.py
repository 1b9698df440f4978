"""
UserOperation parsing, validation and calldata decoding
"""

from x402_gasless.userop.calldata import (
    DecodedCall,
    ExecuteCall,
    TransferCall,
    TransferClaim,
    UnknownCall,
    decode_call,
    extract_transfer,
)
from x402_gasless.userop.validation import (
    compute_user_op_hash,
    parse_user_operation,
    user_op_tag,
    validate_structure,
)

__all__ = [
    "DecodedCall",
    "ExecuteCall",
    "TransferCall",
    "TransferClaim",
    "UnknownCall",
    "decode_call",
    "extract_transfer",
    "compute_user_op_hash",
    "parse_user_operation",
    "user_op_tag",
    "validate_structure",
]
