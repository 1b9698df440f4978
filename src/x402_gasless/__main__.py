"""
Facilitator command line entry point

Commands:
    start             Run the server (ENVIRONMENT defaults to production)
    dev               Run the server in development mode with auto-reload
    test-connection   Check the Alchemy API key against a network node
"""

import argparse
import asyncio
import logging
import os
import sys

import uvicorn
from dotenv import find_dotenv, load_dotenv

from x402_gasless import __version__
from x402_gasless.config import FacilitatorConfig
from x402_gasless.exceptions import ConfigurationError
from x402_gasless.logging_config import log_startup_info, mask_policy_id, setup_logging
from x402_gasless.networks import NetworkRegistry
from x402_gasless.providers import ChainReader
from x402_gasless.server import create_app

logger = logging.getLogger("x402_gasless")

COMMANDS = ("start", "dev", "test-connection")
APP_FACTORY = "x402_gasless.server.app:create_app_from_env"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x402-gasless",
        description="Gasless x402 facilitator using ERC-4337 account abstraction",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"x402-gasless v{__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="start",
        choices=COMMANDS,
        help="Command to run (default: start)",
    )
    parser.add_argument(
        "--network",
        type=str,
        default=None,
        help="Network for test-connection (default: HEALTH_NETWORK or base-sepolia)",
    )
    return parser


async def check_connection(network: str | None = None) -> bool:
    """Query the node for *network* with the configured API key and report fee data"""
    api_key = os.getenv("ALCHEMY_API_KEY")
    if not api_key:
        logger.error("ALCHEMY_API_KEY not found in environment; add it to your .env file")
        return False

    network = network or os.getenv("HEALTH_NETWORK", "base-sepolia")
    registry = NetworkRegistry(api_key)
    if not registry.is_supported(network):
        logger.error("Unsupported network: %s", network)
        return False

    logger.info("Testing connection to %s...", network)
    reader = ChainReader.for_registry(registry)
    if not await reader.test_connection(network):
        logger.error("Connection failed; verify the API key and its access to %s", network)
        return False

    try:
        fees = await reader.get_gas_price(network)
    except Exception as e:
        logger.error("Connected, but fee data query failed: %s", e)
        return False
    logger.info("Connected to %s, gas price %s wei", network, fees["gasPrice"])

    policy_id = os.getenv("ALCHEMY_GAS_POLICY_ID")
    if policy_id:
        logger.info(
            "Gas Manager policy %s found; it is validated on the first settlement",
            mask_policy_id(policy_id),
        )
    else:
        logger.warning("ALCHEMY_GAS_POLICY_ID not found; create a policy in the Gas Manager")
    return True


def serve(reload: bool = False) -> None:
    """Load configuration and run the HTTP server"""
    try:
        config = FacilitatorConfig.from_env()
    except ConfigurationError as e:
        logger.error("Failed to start server: %s", e)
        logger.error("Copy .env.example to .env and fill in your values")
        sys.exit(1)

    setup_logging(config.log_level)
    log_startup_info(config, NetworkRegistry(config.api_key))

    # Reload mode re-imports the app in a worker process, so it needs a factory path
    app = APP_FACTORY if reload else create_app(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        factory=reload,
        reload=reload,
    )


def main(argv: list[str] | None = None) -> None:
    """Run a facilitator command"""
    args = build_parser().parse_args(argv)
    setup_logging()
    load_dotenv(find_dotenv(usecwd=True))

    if args.command == "test-connection":
        sys.exit(0 if asyncio.run(check_connection(args.network)) else 1)

    if args.command == "dev":
        os.environ["ENVIRONMENT"] = "development"
    else:
        os.environ.setdefault("ENVIRONMENT", "production")
    serve(reload=args.command == "dev")


if __name__ == "__main__":
    main()
