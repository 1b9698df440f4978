"""
Logging configuration for x402-gasless
"""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from x402_gasless.config import FacilitatorConfig
    from x402_gasless.networks import NetworkRegistry


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure logging with timestamp, file and line number information

    Args:
        level: Logging level (default: INFO)
    """
    # Create formatter with timestamp, file and line number
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def mask_api_key(api_key: str | None) -> str:
    if not api_key or len(api_key) < 8:
        return "****"
    return f"{api_key[:4]}...{api_key[-4:]}"


def mask_policy_id(policy_id: str | None) -> str:
    if not policy_id or len(policy_id) < 8:
        return "****"
    return f"{policy_id[:8]}...{policy_id[-4:]}"


def log_startup_info(config: "FacilitatorConfig", registry: "NetworkRegistry") -> None:
    """Log the effective configuration with secrets masked"""
    logger = get_logger("x402_gasless")

    logger.info("x402-gasless starting")
    logger.info("API key: %s", mask_api_key(config.api_key))
    logger.info("Gas policy: %s", mask_policy_id(config.policy_id))
    logger.info("Environment: %s", config.environment)
    logger.info("Entry point: %s", config.entry_point)

    networks = registry.supported_networks()
    logger.info("Supported networks (%d):", len(networks))
    for network in networks:
        info = registry.get(network)
        testnet = " [testnet]" if info.is_testnet else ""
        logger.info(
            "  %s (chain: %d)%s USDC %s",
            network,
            info.chain_id,
            testnet,
            registry.canonical_asset(network),
        )

    logger.info("Listening on http://%s:%d", config.host, config.port)
