"""
x402-gasless custom exception hierarchy
"""


class X402Error(Exception):
    """x402 base exception"""

    pass


class DecodeError(X402Error):
    """Payment header is not valid base64 or does not hold a JSON object"""

    pass


class ValidationError(X402Error):
    """Validation-related error"""

    pass


class StructuralError(ValidationError):
    """UserOperation is missing a field or a field is malformed"""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Invalid UserOp: malformed field '{field}'")


class UnsupportedVersionError(ValidationError):
    """x402 protocol version is not supported"""

    def __init__(self, version: object):
        self.version = version
        super().__init__(f"Unsupported x402 version: {version}")


class PaymentMismatchError(ValidationError):
    """Operation does not satisfy the payment requirements"""

    pass


class SchemeMismatchError(PaymentMismatchError):
    """Payment scheme is not the one this facilitator handles"""

    pass


class AssetMismatchError(PaymentMismatchError):
    """Requested asset is not the canonical asset of the network"""

    pass


class TransferNotFoundError(PaymentMismatchError):
    """No decodable transfer in the operation call data"""

    pass


class RecipientMismatchError(PaymentMismatchError):
    """Transfer recipient differs from payTo"""

    pass


class InsufficientAmountError(PaymentMismatchError):
    """Transfer amount is below the required amount"""

    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(f"Transfer amount insufficient: required {required}, got {actual}")


class SignatureError(X402Error):
    """Signature-related error"""

    pass


class ConfigurationError(X402Error):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass


class UnknownTokenError(ConfigurationError):
    """Unknown token"""

    pass


class SettlementError(X402Error):
    """Settlement-related error"""

    pass


class SponsorshipError(SettlementError):
    """Gas sponsorship could not be obtained"""

    pass


class SubmissionError(SettlementError):
    """Bundler rejected the operation or could not be reached"""

    pass


class TransactionError(X402Error):
    """Transaction-related error"""

    pass


class TransactionTimeoutError(TransactionError):
    """Transaction timeout"""

    pass


class ReceiptTimeoutError(TransactionTimeoutError):
    """No UserOperation receipt within the polling budget"""

    def __init__(self, user_op_hash: str, attempts: int):
        self.user_op_hash = user_op_hash
        self.attempts = attempts
        super().__init__(
            f"Timeout waiting for UserOp receipt: {user_op_hash} (after {attempts} attempts)"
        )
