"""
x402 Facilitator: verification and settlement
"""

from x402_gasless.facilitator.settlement import SettlementOrchestrator, SettlementState
from x402_gasless.facilitator.verification import BasicSignatureCheck, PaymentVerifier
from x402_gasless.facilitator.x402_facilitator import X402Facilitator

__all__ = [
    "BasicSignatureCheck",
    "PaymentVerifier",
    "SettlementOrchestrator",
    "SettlementState",
    "X402Facilitator",
]
