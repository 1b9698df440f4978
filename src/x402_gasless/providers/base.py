"""
Provider interfaces used by the settlement orchestrator
"""

from abc import ABC, abstractmethod
from typing import Any

from x402_gasless.types import UserOperation


class SponsorshipProvider(ABC):
    """
    Abstract base class for gas sponsorship (paymaster) providers.
    """

    @abstractmethod
    async def sponsor(self, operation: UserOperation, policy_id: str, network: str) -> str | None:
        """
        Request paymaster data for an operation.

        Args:
            operation: Validated UserOperation
            policy_id: Sponsorship policy identifier
            network: Network identifier (e.g. "base-sepolia")

        Returns:
            paymasterAndData hex string, or None if the provider answered
            without any

        Raises:
            SponsorshipError: If the provider rejects the request
        """
        pass


class BundlerProvider(ABC):
    """
    Abstract base class for ERC-4337 bundlers.
    """

    @abstractmethod
    async def submit(self, operation: UserOperation, network: str) -> str:
        """
        Submit a sponsored operation.

        Returns:
            userOpHash identifying the operation at the bundler

        Raises:
            SubmissionError: On transport or bundler-reported errors
        """
        pass

    @abstractmethod
    async def poll_receipt(self, user_op_hash: str, network: str) -> dict[str, Any] | None:
        """
        Fetch the receipt of a submitted operation.

        Returns:
            Receipt payload, or None while the operation is still pending
        """
        pass
