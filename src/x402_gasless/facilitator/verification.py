"""
Payment verification: match a UserOperation's transfer against payment requirements
"""

import logging
from typing import Protocol

from x402_gasless.exceptions import (
    AssetMismatchError,
    InsufficientAmountError,
    RecipientMismatchError,
    SchemeMismatchError,
    SignatureError,
    TransferNotFoundError,
    UnsupportedNetworkError,
    X402Error,
)
from x402_gasless.networks import NetworkRegistry
from x402_gasless.types import (
    SCHEME_AA_ERC4337,
    PaymentRequirements,
    UserOperation,
    VerifyResponse,
)
from x402_gasless.userop import (
    TransferClaim,
    extract_transfer,
    parse_user_operation,
    user_op_tag,
)
from x402_gasless.utils.hexstr import EMPTY_HEX

logger = logging.getLogger(__name__)

MIN_SIGNATURE_BYTES = 65


class SignatureChecker(Protocol):
    """Hook for checking UserOperation signatures during verification"""

    async def check(self, operation: UserOperation, network: str) -> None:
        """Raise SignatureError if the signature is unacceptable"""
        ...


class BasicSignatureCheck:
    """Shape-only signature check; performs no cryptographic recovery"""

    async def check(self, operation: UserOperation, network: str) -> None:
        signature = operation.signature
        if signature in (EMPTY_HEX, "0x00"):
            raise SignatureError("UserOp signature is empty")
        if (len(signature) - 2) // 2 < MIN_SIGNATURE_BYTES:
            raise SignatureError("UserOp signature is too short")
        logger.debug("UserOp signature shape check passed for %s", operation.sender)


class PaymentVerifier:
    """
    Verifies that a payment header carries a transfer satisfying the requirements.

    Checks run in a fixed order and the first failure is reported.
    """

    def __init__(
        self,
        registry: NetworkRegistry,
        signature_checker: SignatureChecker | None = None,
    ) -> None:
        self._registry = registry
        self._signature_checker = signature_checker

    def check_payment(
        self, operation: UserOperation, requirements: PaymentRequirements
    ) -> TransferClaim:
        """
        Run every requirement check against *operation*.

        Returns:
            The matched transfer claim

        Raises:
            PaymentMismatchError: Subclass naming the first failing check
            UnsupportedNetworkError: If the network is not in the registry
        """
        if requirements.scheme != SCHEME_AA_ERC4337:
            raise SchemeMismatchError(f"Unsupported payment scheme: {requirements.scheme}")

        network = requirements.network
        if not self._registry.is_supported(network):
            raise UnsupportedNetworkError(f"Unsupported network: {network}")

        expected_asset = self._registry.canonical_asset(network)
        if requirements.asset.lower() != expected_asset.lower():
            raise AssetMismatchError(
                f"USDC contract mismatch: expected {expected_asset}, got {requirements.asset}"
            )

        claim = extract_transfer(operation)
        if claim is None:
            raise TransferNotFoundError("UserOp does not contain a valid USDC transfer")

        if claim.recipient.lower() != requirements.pay_to.lower():
            raise RecipientMismatchError(
                f"Transfer recipient mismatch: expected {requirements.pay_to}, "
                f"got {claim.recipient}"
            )

        required = requirements.min_amount
        if claim.amount < required:
            raise InsufficientAmountError(required, claim.amount)

        return claim

    def match(self, operation: UserOperation, requirements: PaymentRequirements) -> VerifyResponse:
        """Compare *operation* with *requirements* and return a verdict"""
        try:
            self.check_payment(operation, requirements)
        except X402Error as e:
            return VerifyResponse(is_valid=False, invalid_reason=str(e))
        return VerifyResponse(is_valid=True)

    async def verify(
        self, payment_header: str, requirements: PaymentRequirements
    ) -> VerifyResponse:
        """
        Decode, validate and match a payment header.

        Every failure becomes an invalid verdict; this method does not raise.
        """
        try:
            logger.debug("Parsing UserOp from payment header")
            operation = parse_user_operation(payment_header)
            tag = user_op_tag(operation)
            logger.info("UserOp parsed: %s", tag)

            self.check_payment(operation, requirements)
            if self._signature_checker is not None:
                await self._signature_checker.check(operation, requirements.network)
        except X402Error as e:
            logger.warning("Payment verification failed: %s", e)
            return VerifyResponse(is_valid=False, invalid_reason=str(e))
        except Exception as e:
            logger.error("Unexpected verification error", exc_info=True)
            return VerifyResponse(is_valid=False, invalid_reason=str(e) or type(e).__name__)

        logger.info("Payment verification successful: %s", tag)
        return VerifyResponse(is_valid=True)
