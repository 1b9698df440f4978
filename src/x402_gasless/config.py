"""
Facilitator configuration
Built once from the environment and passed explicitly to every component
"""

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from x402_gasless.abi import DEFAULT_ENTRY_POINT
from x402_gasless.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_ENV = ("ALCHEMY_API_KEY", "ALCHEMY_GAS_POLICY_ID")
MIN_API_KEY_LENGTH = 20

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay polling budget"""

    attempts: int = 30
    interval: float = 1.0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigurationError("Retry attempts must be at least 1")
        if self.interval < 0:
            raise ConfigurationError("Retry interval must be non-negative")


@dataclass(frozen=True)
class FacilitatorConfig:
    """Facilitator settings

    Only the Alchemy API key and gas policy are required; everything else
    has a default.
    """

    api_key: str
    policy_id: str
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"
    cors_origin: str = "*"
    entry_point: str = DEFAULT_ENTRY_POINT
    receipt_polling: RetryPolicy = field(default_factory=RetryPolicy)
    settlement_timeout: float | None = None
    reverify_on_settle: bool = False
    health_network: str = "base-sepolia"

    def __post_init__(self) -> None:
        if not self.api_key or len(self.api_key) < MIN_API_KEY_LENGTH:
            raise ConfigurationError("ALCHEMY_API_KEY appears to be invalid (too short)")
        if not self.policy_id:
            raise ConfigurationError("ALCHEMY_GAS_POLICY_ID is required")
        if not _UUID_RE.match(self.policy_id):
            logger.warning(
                "ALCHEMY_GAS_POLICY_ID does not appear to be a valid UUID; "
                "policy validation will occur on first transaction attempt"
            )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "FacilitatorConfig":
        """Load configuration from environment variables (and a .env file if present)

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        missing = [key for key in REQUIRED_ENV if not os.getenv(key)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        timeout = os.getenv("SETTLEMENT_TIMEOUT")
        try:
            return cls(
                api_key=os.environ["ALCHEMY_API_KEY"],
                policy_id=os.environ["ALCHEMY_GAS_POLICY_ID"],
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3000")),
                environment=os.getenv("ENVIRONMENT", "development"),
                log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
                cors_origin=os.getenv("CORS_ORIGIN", "*"),
                entry_point=os.getenv("ENTRY_POINT_ADDRESS", DEFAULT_ENTRY_POINT),
                receipt_polling=RetryPolicy(
                    attempts=int(os.getenv("RECEIPT_POLL_ATTEMPTS", "30")),
                    interval=float(os.getenv("RECEIPT_POLL_INTERVAL", "1.0")),
                ),
                settlement_timeout=float(timeout) if timeout else None,
                reverify_on_settle=os.getenv("REVERIFY_ON_SETTLE", "false").lower()
                in ("1", "true", "yes"),
                health_network=os.getenv("HEALTH_NETWORK", "base-sepolia"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e
