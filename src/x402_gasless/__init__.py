"""
x402-gasless - Gasless x402 facilitator for ERC-4337 UserOperations

Verifies USDC payments carried as base64 UserOperations and settles them
through a sponsoring paymaster and a bundler.
"""

__version__ = "0.1.0"

from x402_gasless.config import FacilitatorConfig, RetryPolicy
from x402_gasless.encoding import decode_payment_header, encode_payment_header, is_well_formed
from x402_gasless.exceptions import (
    AssetMismatchError,
    ConfigurationError,
    DecodeError,
    InsufficientAmountError,
    PaymentMismatchError,
    ReceiptTimeoutError,
    RecipientMismatchError,
    SchemeMismatchError,
    SettlementError,
    SignatureError,
    SponsorshipError,
    StructuralError,
    SubmissionError,
    TransactionError,
    TransactionTimeoutError,
    TransferNotFoundError,
    UnknownTokenError,
    UnsupportedNetworkError,
    UnsupportedVersionError,
    ValidationError,
    X402Error,
)
from x402_gasless.networks import NetworkInfo, NetworkRegistry
from x402_gasless.tokens import TokenInfo, TokenRegistry
from x402_gasless.types import (
    SCHEME_AA_ERC4337,
    X402_VERSION,
    PaymentRequirements,
    SettleRequest,
    SettleResponse,
    SupportedResponse,
    UserOperation,
    VerifyRequest,
    VerifyResponse,
)

__all__ = [
    "__version__",
    # Config
    "FacilitatorConfig",
    "RetryPolicy",
    # Codec
    "decode_payment_header",
    "encode_payment_header",
    "is_well_formed",
    # Types
    "SCHEME_AA_ERC4337",
    "X402_VERSION",
    "UserOperation",
    "PaymentRequirements",
    "VerifyRequest",
    "VerifyResponse",
    "SettleRequest",
    "SettleResponse",
    "SupportedResponse",
    # Exceptions
    "X402Error",
    "DecodeError",
    "ValidationError",
    "StructuralError",
    "UnsupportedVersionError",
    "PaymentMismatchError",
    "SchemeMismatchError",
    "AssetMismatchError",
    "TransferNotFoundError",
    "RecipientMismatchError",
    "InsufficientAmountError",
    "SignatureError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "UnknownTokenError",
    "SettlementError",
    "SponsorshipError",
    "SubmissionError",
    "TransactionError",
    "TransactionTimeoutError",
    "ReceiptTimeoutError",
    # Networks and tokens
    "NetworkInfo",
    "NetworkRegistry",
    "TokenInfo",
    "TokenRegistry",
]
