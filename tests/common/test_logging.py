"""
Tests for logging helpers.
"""

import logging

from x402_gasless.logging_config import (
    log_startup_info,
    mask_api_key,
    mask_policy_id,
    setup_logging,
)


def test_mask_api_key():
    assert mask_api_key("abcd1234efgh5678") == "abcd...5678"
    assert mask_api_key("short") == "****"
    assert mask_api_key(None) == "****"


def test_mask_policy_id():
    assert mask_policy_id("12345678-1234-1234-1234-123456789abc") == "12345678...9abc"


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging("WARNING")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
    finally:
        root.handlers[:], root.level = saved[0], saved[1]


def test_startup_info_masks_secrets(config, registry, caplog):
    with caplog.at_level(logging.INFO, logger="x402_gasless"):
        log_startup_info(config, registry)

    assert config.api_key not in caplog.text
    assert "12345678..." in caplog.text
    assert "base-sepolia (chain: 84532) [testnet]" in caplog.text
