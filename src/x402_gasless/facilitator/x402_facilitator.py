"""
X402Facilitator - Entry point for verify, settle and capability queries
"""

from x402_gasless.config import FacilitatorConfig
from x402_gasless.exceptions import UnsupportedVersionError
from x402_gasless.facilitator.settlement import SettlementOrchestrator
from x402_gasless.facilitator.verification import PaymentVerifier
from x402_gasless.networks import NetworkRegistry
from x402_gasless.providers import (
    AlchemyBundler,
    AlchemyGasManager,
    ChainReader,
    JsonRpcClient,
)
from x402_gasless.types import (
    SCHEME_AA_ERC4337,
    X402_VERSION,
    SettleRequest,
    SettleResponse,
    SupportedKind,
    SupportedResponse,
    VerifyRequest,
    VerifyResponse,
)


class X402Facilitator:
    """
    Core payment processor for the aa-erc4337 scheme.

    Checks the protocol version of each request before touching the payment
    header, then delegates to the verifier or the settlement orchestrator.
    """

    def __init__(
        self,
        config: FacilitatorConfig,
        registry: NetworkRegistry,
        verifier: PaymentVerifier,
        orchestrator: SettlementOrchestrator,
        chain: ChainReader | None = None,
        rpc: JsonRpcClient | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.chain = chain or ChainReader.for_registry(registry)
        self._verifier = verifier
        self._orchestrator = orchestrator
        self._rpc = rpc

    @classmethod
    def from_config(cls, config: FacilitatorConfig) -> "X402Facilitator":
        """Wire the facilitator against Alchemy's Gas Manager and bundler"""
        registry = NetworkRegistry(config.api_key)
        rpc = JsonRpcClient()
        verifier = PaymentVerifier(registry)
        orchestrator = SettlementOrchestrator(
            config,
            registry,
            sponsor=AlchemyGasManager(registry, rpc, config.entry_point),
            bundler=AlchemyBundler(registry, rpc, config.entry_point),
            verifier=verifier,
        )
        return cls(config, registry, verifier, orchestrator, rpc=rpc)

    async def close(self) -> None:
        if self._rpc is not None:
            await self._rpc.close()

    @staticmethod
    def check_version(version: int | None) -> None:
        """
        Raises:
            UnsupportedVersionError: If *version* is not the supported x402 version
        """
        if version != X402_VERSION:
            raise UnsupportedVersionError(version)

    async def verify(self, request: VerifyRequest) -> VerifyResponse:
        """
        Verify a payment without executing it.

        Raises:
            UnsupportedVersionError: Before any decoding, for a foreign x402Version
        """
        self.check_version(request.x402_version)
        return await self._verifier.verify(request.payment_header, request.payment_requirements)

    async def settle(self, request: SettleRequest) -> SettleResponse:
        """
        Settle a previously verified payment on-chain.

        Raises:
            UnsupportedVersionError: Before any decoding, for a foreign x402Version
        """
        self.check_version(request.x402_version)
        return await self._orchestrator.settle(
            request.payment_header, request.payment_requirements
        )

    def supported(self) -> SupportedResponse:
        """Return every network/scheme combination this facilitator accepts"""
        kinds = [
            SupportedKind(x402Version=X402_VERSION, scheme=SCHEME_AA_ERC4337, network=network)
            for network in self.registry.supported_networks()
        ]
        return SupportedResponse(kinds=kinds)
