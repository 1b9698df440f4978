"""
Settlement: sponsor, submit and confirm a verified UserOperation
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from eth_utils import is_address

from x402_gasless.config import FacilitatorConfig
from x402_gasless.exceptions import (
    ReceiptTimeoutError,
    SettlementError,
    SponsorshipError,
    SubmissionError,
    X402Error,
)
from x402_gasless.facilitator.verification import PaymentVerifier
from x402_gasless.networks import NetworkRegistry
from x402_gasless.providers.base import BundlerProvider, SponsorshipProvider
from x402_gasless.types import PaymentRequirements, SettleResponse, UserOperation
from x402_gasless.userop import compute_user_op_hash, parse_user_operation, user_op_tag
from x402_gasless.utils.hexstr import EMPTY_HEX, is_hex_string
from x402_gasless.utils.retry import poll_until_found

logger = logging.getLogger(__name__)


class SettlementState(str, Enum):
    PARSED = "PARSED"
    AUGMENTED = "AUGMENTED"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


def receipt_transaction_hash(receipt: dict[str, Any]) -> str | None:
    """Pull the transaction hash out of an eth_getUserOperationReceipt result"""
    inner = receipt.get("receipt")
    if isinstance(inner, dict) and inner.get("transactionHash"):
        return inner["transactionHash"]
    return receipt.get("transactionHash")


class SettlementOrchestrator:
    """
    Runs PARSED -> AUGMENTED -> SUBMITTED -> CONFIRMED for one payment.

    Callers are expected to have verified the payment first; the matcher is
    only re-run when ``config.reverify_on_settle`` is set.
    """

    def __init__(
        self,
        config: FacilitatorConfig,
        registry: NetworkRegistry,
        sponsor: SponsorshipProvider,
        bundler: BundlerProvider,
        verifier: PaymentVerifier | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._sponsor = sponsor
        self._bundler = bundler
        self._verifier = verifier or PaymentVerifier(registry)

    async def settle(
        self, payment_header: str, requirements: PaymentRequirements
    ) -> SettleResponse:
        """
        Settle a payment and report the outcome.

        A failure at any stage becomes a failed SettleResponse carrying the
        error message; this method does not raise.
        """
        network = requirements.network
        try:
            if self._config.settlement_timeout is not None:
                tx_hash = await asyncio.wait_for(
                    self._run(payment_header, requirements),
                    timeout=self._config.settlement_timeout,
                )
            else:
                tx_hash = await self._run(payment_header, requirements)
        except X402Error as e:
            return self._failed(network, str(e))
        except asyncio.TimeoutError:
            return self._failed(
                network, f"Settlement timed out after {self._config.settlement_timeout}s"
            )
        except Exception as e:
            logger.error("Unexpected settlement error on %s", network, exc_info=True)
            return self._failed(network, str(e) or type(e).__name__)

        return SettleResponse(success=True, tx_hash=tx_hash, network_id=network)

    async def _run(self, payment_header: str, requirements: PaymentRequirements) -> str:
        network = requirements.network

        operation = parse_user_operation(payment_header)
        tag = user_op_tag(operation)
        self._transition(tag, SettlementState.PARSED, network=network)

        if self._config.reverify_on_settle:
            self._verifier.check_payment(operation, requirements)

        sponsored = await self._augment(operation, network)
        self._transition(tag, SettlementState.AUGMENTED)

        user_op_hash = await self._submit(sponsored, network)
        self._transition(tag, SettlementState.SUBMITTED, user_op_hash=user_op_hash)
        self._cross_check_hash(sponsored, network, user_op_hash)

        tx_hash = await self._confirm(user_op_hash, network)
        self._transition(tag, SettlementState.CONFIRMED, tx_hash=tx_hash)
        return tx_hash

    async def _augment(self, operation: UserOperation, network: str) -> UserOperation:
        try:
            paymaster_and_data = await self._sponsor.sponsor(
                operation, self._config.policy_id, network
            )
        except SponsorshipError:
            raise
        except Exception as e:
            logger.error("Failed to get paymaster data", exc_info=True)
            raise SponsorshipError(f"Failed to get paymaster data: {e}") from e

        if not paymaster_and_data:
            logger.warning("Sponsor returned no paymasterAndData on %s; using '0x'", network)
            paymaster_and_data = EMPTY_HEX
        if not is_hex_string(paymaster_and_data, allow_empty=True):
            raise SponsorshipError(f"Sponsor returned malformed paymasterAndData on {network}")

        return operation.with_paymaster_and_data(paymaster_and_data)

    async def _submit(self, operation: UserOperation, network: str) -> str:
        try:
            return await self._bundler.submit(operation, network)
        except SubmissionError:
            raise
        except Exception as e:
            logger.error("Failed to submit UserOp", exc_info=True)
            raise SubmissionError(f"Failed to submit UserOp: {e}") from e

    async def _confirm(self, user_op_hash: str, network: str) -> str:
        policy = self._config.receipt_polling
        receipt = await poll_until_found(
            lambda: self._bundler.poll_receipt(user_op_hash, network),
            policy,
            description=f"UserOp receipt {user_op_hash}",
        )
        if receipt is None:
            raise ReceiptTimeoutError(user_op_hash, policy.attempts)

        tx_hash = receipt_transaction_hash(receipt)
        if not isinstance(tx_hash, str) or not tx_hash:
            raise SettlementError(f"UserOp receipt for {user_op_hash} has no transaction hash")
        if receipt.get("success") is False:
            logger.warning("UserOp %s was included but reverted: %s", user_op_hash, tx_hash)
        return tx_hash

    def _cross_check_hash(self, operation: UserOperation, network: str, user_op_hash: str) -> None:
        if not is_address(operation.sender) or not self._registry.is_supported(network):
            return
        try:
            expected = compute_user_op_hash(
                operation, self._config.entry_point, self._registry.chain_id(network)
            )
        except Exception as e:
            logger.warning("Could not compute userOpHash for %s: %s", user_op_hash, e)
            return
        if expected.lower() != user_op_hash.lower():
            logger.warning(
                "Bundler userOpHash %s differs from locally computed %s", user_op_hash, expected
            )

    @staticmethod
    def _failed(network: str, message: str) -> SettleResponse:
        logger.error("Settlement -> %s on %s: %s", SettlementState.FAILED.value, network, message)
        return SettleResponse(success=False, network_id=network, error=message)

    @staticmethod
    def _transition(tag: str, state: SettlementState, **context: Any) -> None:
        details = " ".join(f"{k}={v}" for k, v in context.items())
        logger.info("Settlement %s -> %s %s", tag, state.value, details)
