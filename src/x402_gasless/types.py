"""
Type definitions for the x402 account-abstraction payment scheme
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from x402_gasless.utils.hexstr import EMPTY_HEX, is_hex_string, parse_quantity, to_quantity

X402_VERSION = 1

# Scheme identifier carried in PaymentRequirements.scheme
SCHEME_AA_ERC4337 = "aa-erc4337"

QUANTITY_FIELDS = (
    "nonce",
    "call_gas_limit",
    "verification_gas_limit",
    "pre_verification_gas",
    "max_fee_per_gas",
    "max_priority_fee_per_gas",
)


class UserOperation(BaseModel):
    """ERC-4337 (EntryPoint v0.6) UserOperation carried in the payment header.

    Quantities are held as ints and serialized as decimal strings so the
    header keeps full precision. Use ``to_rpc_dict`` for bundler calls.
    """

    sender: str
    nonce: int
    init_code: str = Field(EMPTY_HEX, alias="initCode")
    call_data: str = Field(alias="callData")
    call_gas_limit: int = Field(alias="callGasLimit")
    verification_gas_limit: int = Field(alias="verificationGasLimit")
    pre_verification_gas: int = Field(alias="preVerificationGas")
    max_fee_per_gas: int = Field(alias="maxFeePerGas")
    max_priority_fee_per_gas: int = Field(alias="maxPriorityFeePerGas")
    paymaster_and_data: str = Field(EMPTY_HEX, alias="paymasterAndData")
    signature: str

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator(*QUANTITY_FIELDS, mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> int:
        return parse_quantity(value)

    @field_validator("sender", "call_data", "signature")
    @classmethod
    def _check_required_hex(cls, value: str) -> str:
        if not is_hex_string(value):
            raise ValueError("must be a non-empty hex string")
        return value

    @field_validator("init_code", "paymaster_and_data")
    @classmethod
    def _check_optional_hex(cls, value: str) -> str:
        if not is_hex_string(value, allow_empty=True):
            raise ValueError("must be a hex string or '0x'")
        return value

    @field_serializer(*QUANTITY_FIELDS)
    def _serialize_quantity(self, value: int) -> str:
        return str(value)

    def with_paymaster_and_data(self, paymaster_and_data: str) -> "UserOperation":
        """Return a copy carrying sponsorship data; the original is left untouched"""
        if not is_hex_string(paymaster_and_data, allow_empty=True):
            raise ValueError(f"paymasterAndData must be a hex string, got {paymaster_and_data!r}")
        return self.model_copy(update={"paymaster_and_data": paymaster_and_data})

    def to_rpc_dict(self) -> dict[str, str]:
        """Bundler JSON-RPC representation (hex quantities)"""
        return {
            "sender": self.sender,
            "nonce": to_quantity(self.nonce),
            "initCode": self.init_code,
            "callData": self.call_data,
            "callGasLimit": to_quantity(self.call_gas_limit),
            "verificationGasLimit": to_quantity(self.verification_gas_limit),
            "preVerificationGas": to_quantity(self.pre_verification_gas),
            "maxFeePerGas": to_quantity(self.max_fee_per_gas),
            "maxPriorityFeePerGas": to_quantity(self.max_priority_fee_per_gas),
            "paymasterAndData": self.paymaster_and_data,
            "signature": self.signature,
        }


class PaymentRequirements(BaseModel):
    """Payment requirements declared by the resource server (x402 v1)"""

    scheme: str
    network: str
    max_amount_required: str = Field(alias="maxAmountRequired")
    asset: str
    pay_to: str = Field(alias="payTo")
    resource: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    max_timeout_seconds: Optional[int] = Field(None, alias="maxTimeoutSeconds")
    extra: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True

    @field_validator("max_amount_required")
    @classmethod
    def _check_amount(cls, value: str) -> str:
        if not value.isdigit() or not value.isascii():
            raise ValueError("maxAmountRequired must be a non-negative decimal string")
        parse_quantity(value)
        return value

    @property
    def min_amount(self) -> int:
        """Required amount in the asset's smallest unit"""
        return parse_quantity(self.max_amount_required)


class VerifyRequest(BaseModel):
    """Body of POST /verify"""

    x402_version: Optional[int] = Field(None, alias="x402Version")
    payment_header: str = Field(alias="paymentHeader")
    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")

    class Config:
        populate_by_name = True


class SettleRequest(VerifyRequest):
    """Body of POST /settle"""

    pass


class VerifyResponse(BaseModel):
    """Verification verdict; an invalid verdict always carries a reason"""

    is_valid: bool = Field(alias="isValid")
    invalid_reason: Optional[str] = Field(None, alias="invalidReason")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_reason(self) -> "VerifyResponse":
        if self.is_valid and self.invalid_reason is not None:
            raise ValueError("a valid verdict cannot carry an invalidReason")
        if not self.is_valid and not self.invalid_reason:
            raise ValueError("an invalid verdict requires an invalidReason")
        return self


class SettleResponse(BaseModel):
    """Settlement verdict"""

    success: bool
    tx_hash: Optional[str] = Field(None, alias="txHash")
    network_id: Optional[str] = Field(None, alias="networkId")
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_outcome(self) -> "SettleResponse":
        if self.success:
            if not self.tx_hash or self.error is not None:
                raise ValueError("a successful settlement requires txHash and no error")
        elif not self.error or self.tx_hash is not None:
            raise ValueError("a failed settlement requires an error and no txHash")
        return self


class SupportedKind(BaseModel):
    """Supported payment kind"""

    x402_version: int = Field(alias="x402Version")
    scheme: str
    network: str

    class Config:
        populate_by_name = True


class SupportedResponse(BaseModel):
    """Supported response from facilitator"""

    kinds: list[SupportedKind]


class ChainHealth(BaseModel):
    connected: bool
    network: str
    policy_configured: bool = Field(alias="policyConfigured")

    class Config:
        populate_by_name = True


class NetworkSummary(BaseModel):
    supported: int
    names: list[str] = Field(alias="list")

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Response of GET /health"""

    status: str
    timestamp: str
    version: str
    chain: ChainHealth
    networks: NetworkSummary
