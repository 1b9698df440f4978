"""
HTTP server for the facilitator
"""

from x402_gasless.server.app import create_app

__all__ = ["create_app"]
