"""
Shared ABI definitions for the call shapes found in UserOperation callData
"""

# ERC-4337 EntryPoint v0.6
DEFAULT_ENTRY_POINT = "0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789"

# transfer(address,uint256)
TRANSFER_SELECTOR = "0xa9059cbb"

# execute(address,uint256,bytes) on SimpleAccount-style smart accounts
EXECUTE_SELECTOR = "0xb61d27f6"

SELECTOR_HEX_LENGTH = 8
WORD_HEX_LENGTH = 64
ADDRESS_HEX_LENGTH = 40

# Types of the tuple hashed into a v0.6 userOpHash (dynamic fields pre-hashed)
USER_OP_PACK_TYPES = [
    "address",
    "uint256",
    "bytes32",
    "bytes32",
    "uint256",
    "uint256",
    "uint256",
    "uint256",
    "uint256",
    "bytes32",
]
