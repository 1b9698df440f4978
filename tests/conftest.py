"""
Pytest configuration and shared fixtures
"""

import pytest

from x402_gasless.config import FacilitatorConfig, RetryPolicy
from x402_gasless.encoding import encode_payment_header
from x402_gasless.networks import NetworkRegistry
from x402_gasless.types import PaymentRequirements

API_KEY = "test-alchemy-key-0123456789abcdef"
POLICY_ID = "12345678-1234-1234-1234-123456789abc"
SENDER = "0x" + "11" * 20
RECIPIENT = "0xabc" + "0" * 34 + "001"
BASE_SEPOLIA_USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"


def transfer_call_data(recipient: str, amount: int) -> str:
    """Encode transfer(address,uint256) call data"""
    return "0xa9059cbb" + "0" * 24 + recipient[2:].lower() + format(amount, "064x")


def user_op_record(**overrides) -> dict:
    """A structurally valid UserOperation record in header wire format"""
    record = {
        "sender": SENDER,
        "nonce": "0",
        "initCode": "0x",
        "callData": transfer_call_data(RECIPIENT, 1_000_000),
        "callGasLimit": "100000",
        "verificationGasLimit": "150000",
        "preVerificationGas": "50000",
        "maxFeePerGas": "1000000000",
        "maxPriorityFeePerGas": "100000000",
        "paymasterAndData": "0x",
        "signature": "0x" + "ab" * 65,
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_call_data():
    return transfer_call_data


@pytest.fixture
def make_record():
    return user_op_record


@pytest.fixture
def payment_header():
    return encode_payment_header(user_op_record())


@pytest.fixture
def requirements():
    return PaymentRequirements(
        scheme="aa-erc4337",
        network="base-sepolia",
        maxAmountRequired="1000000",
        asset=BASE_SEPOLIA_USDC,
        payTo=RECIPIENT,
        resource="https://api.example.com/premium",
    )


@pytest.fixture
def registry():
    return NetworkRegistry(API_KEY)


@pytest.fixture
def config():
    return FacilitatorConfig(
        api_key=API_KEY,
        policy_id=POLICY_ID,
        receipt_polling=RetryPolicy(attempts=3, interval=0),
    )


@pytest.fixture
def anyio_backend():
    return "asyncio"
