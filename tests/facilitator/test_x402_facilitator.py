"""
Tests for X402Facilitator.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from x402_gasless.exceptions import UnsupportedVersionError
from x402_gasless.facilitator import X402Facilitator
from x402_gasless.networks import NETWORKS
from x402_gasless.types import SettleRequest, SettleResponse, VerifyRequest, VerifyResponse


@pytest.fixture
def verifier():
    mock = MagicMock()
    mock.verify = AsyncMock(return_value=VerifyResponse(is_valid=True))
    return mock


@pytest.fixture
def orchestrator():
    mock = MagicMock()
    mock.settle = AsyncMock(
        return_value=SettleResponse(
            success=True, tx_hash="0x" + "bb" * 32, network_id="base-sepolia"
        )
    )
    return mock


@pytest.fixture
def facilitator(config, registry, verifier, orchestrator):
    return X402Facilitator(config, registry, verifier, orchestrator, chain=MagicMock())


def _request(cls, payment_header, requirements, version=1):
    return cls(
        x402Version=version,
        paymentHeader=payment_header,
        paymentRequirements=requirements,
    )


class TestX402Facilitator:
    @pytest.mark.anyio
    async def test_verify_delegates(self, facilitator, verifier, payment_header, requirements):
        result = await facilitator.verify(_request(VerifyRequest, payment_header, requirements))

        assert result.is_valid is True
        verifier.verify.assert_awaited_once_with(payment_header, requirements)

    @pytest.mark.anyio
    async def test_settle_delegates(self, facilitator, orchestrator, payment_header, requirements):
        result = await facilitator.settle(_request(SettleRequest, payment_header, requirements))

        assert result.success is True
        orchestrator.settle.assert_awaited_once_with(payment_header, requirements)

    @pytest.mark.anyio
    @pytest.mark.parametrize("version", [2, 0, None])
    async def test_version_checked_before_decoding(
        self, facilitator, verifier, orchestrator, requirements, version
    ):
        # The header is garbage: the version check must fire first
        with pytest.raises(UnsupportedVersionError):
            await facilitator.verify(_request(VerifyRequest, "@@@", requirements, version))
        with pytest.raises(UnsupportedVersionError):
            await facilitator.settle(_request(SettleRequest, "@@@", requirements, version))

        verifier.verify.assert_not_awaited()
        orchestrator.settle.assert_not_awaited()

    def test_supported_lists_every_network(self, facilitator):
        kinds = facilitator.supported().kinds

        assert {kind.network for kind in kinds} == set(NETWORKS)
        assert all(kind.scheme == "aa-erc4337" for kind in kinds)
        assert all(kind.x402_version == 1 for kind in kinds)

    def test_supported_wire_format(self, facilitator):
        dumped = facilitator.supported().model_dump(by_alias=True)
        assert dumped["kinds"][0]["x402Version"] == 1

    @pytest.mark.anyio
    async def test_from_config_wires_alchemy_providers(self, config):
        facilitator = X402Facilitator.from_config(config)
        try:
            assert facilitator.registry.is_supported("base-sepolia")
            assert facilitator.chain is not None
        finally:
            await facilitator.close()
