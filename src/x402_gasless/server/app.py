"""
FastAPI application exposing the facilitator over HTTP
"""

import logging
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from x402_gasless import __version__
from x402_gasless.config import FacilitatorConfig
from x402_gasless.exceptions import UnsupportedVersionError
from x402_gasless.facilitator import X402Facilitator
from x402_gasless.logging_config import setup_logging
from x402_gasless.types import (
    ChainHealth,
    HealthResponse,
    NetworkSummary,
    SettleRequest,
    SettleResponse,
    SupportedResponse,
    VerifyRequest,
    VerifyResponse,
)

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Bad Request", "message": message})


def create_app(
    config: FacilitatorConfig,
    facilitator: X402Facilitator | None = None,
) -> FastAPI:
    """
    Build the facilitator app.

    Args:
        config: Facilitator configuration
        facilitator: Pre-built facilitator (tests inject one with mocked providers)
    """
    facilitator = facilitator or X402Facilitator.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await facilitator.close()

    app = FastAPI(
        title="x402-gasless",
        description="Gasless x402 facilitator using ERC-4337 account abstraction",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.is_production else "/docs",
        redoc_url=None if config.is_production else "/redoc",
        openapi_url=None if config.is_production else "/openapi.json",
    )
    app.state.facilitator = facilitator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in config.cors_origin.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Any:
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
        return _bad_request(f"Invalid or missing fields: {', '.join(fields)}")

    @app.exception_handler(UnsupportedVersionError)
    async def version_error_handler(request: Request, exc: UnsupportedVersionError) -> Any:
        return _bad_request(str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Any:
        if exc.status_code == 404:
            message = f"Route {request.method} {request.url.path} not found"
            return JSONResponse(status_code=404, content={"error": "Not Found", "message": message})
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.detail, "status": exc.status_code}
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> Any:
        logger.error(
            "Request error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        content: dict[str, Any] = {"error": str(exc) or "Internal Server Error", "status": 500}
        if config.is_development:
            content["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=500, content=content)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Service info endpoint"""
        return {
            "name": "x402-gasless",
            "version": __version__,
            "description": "Gasless x402 facilitator using ERC-4337 account abstraction",
            "endpoints": {
                "verify": "POST /verify",
                "settle": "POST /settle",
                "supported": "GET /supported",
                "health": "GET /health",
            },
        }

    @app.post("/verify", response_model=VerifyResponse)
    async def verify(request: VerifyRequest) -> VerifyResponse:
        """Verify a UserOperation payment without executing it"""
        return await facilitator.verify(request)

    @app.post("/settle", response_model=SettleResponse)
    async def settle(request: SettleRequest) -> SettleResponse:
        """Sponsor, submit and confirm a verified payment"""
        return await facilitator.settle(request)

    @app.get("/supported", response_model=SupportedResponse)
    async def supported() -> SupportedResponse:
        """Get supported payment schemes and networks"""
        return facilitator.supported()

    @app.get("/health")
    async def health() -> Any:
        """Check node connectivity and report configured networks"""
        timestamp = datetime.now(timezone.utc).isoformat()
        network = config.health_network
        try:
            connected = await facilitator.chain.test_connection(network)
        except Exception as e:
            logger.error("Health check failed: %s", e)
            return JSONResponse(
                status_code=500,
                content={"status": "unhealthy", "timestamp": timestamp, "error": str(e)},
            )

        networks = facilitator.registry.supported_networks()
        return HealthResponse(
            status="healthy",
            timestamp=timestamp,
            version=__version__,
            chain=ChainHealth(
                connected=connected,
                network=network,
                policyConfigured=bool(config.policy_id),
            ),
            networks=NetworkSummary(supported=len(networks), list=networks),
        ).model_dump(by_alias=True)

    return app


def create_app_from_env() -> FastAPI:
    """App factory for uvicorn's factory and reload modes"""
    config = FacilitatorConfig.from_env()
    setup_logging(config.log_level)
    return create_app(config)
