"""
FastAPI application entry point.

This is the main FastAPI application that wires the backend registry and the
outbound client into the pool, control and health routers.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import http_exception_handler, validation_exception_handler
from .routers import pools, control, health
from src.relay.client import BackendClient
from src.relay.config import RelayConfig, load_config
from src.relay.registry import BackendRegistry

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    The registry and client already exist when the app is built; startup only
    logs, shutdown closes the pooled HTTP connections.
    """
    logger.info(f"Pool relay ready with {len(app.state.registry)} registered backends")

    yield  # Server runs here

    logger.info("Shutting down pool relay...")
    await app.state.backend_client.aclose()

def seed_registry(registry: BackendRegistry, config: RelayConfig) -> None:
    """Register the backends listed in the config file, with the same rules as POST /createServer."""
    for seed in config.seed_backends:
        registry.register(seed.username, seed.api_url, seed.control_url)

def create_app(
    config: Optional[RelayConfig] = None,
    registry: Optional[BackendRegistry] = None,
    backend_client: Optional[BackendClient] = None
) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Each app owns its registry and backend client for its whole lifetime;
    tests pass their own to isolate state and fake the backends.
    """
    config = config or load_config()

    app = FastAPI(
        title="Pool Relay API",
        description="Registry and proxy for pool-control backends",
        version=health.API_VERSION,
        lifespan=lifespan
    )

    app.state.config = config
    app.state.registry = registry if registry is not None else BackendRegistry()
    app.state.backend_client = backend_client or BackendClient(
        request_timeout_s=config.backends.request_timeout_s,
        max_concurrency=config.backends.max_concurrency
    )
    seed_registry(app.state.registry, config)

    if config.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include API routers
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(pools.router, tags=["pools"])
    app.include_router(control.router, tags=["control"])

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "Pool Relay API",
            "version": health.API_VERSION,
            "status": "operational",
            "endpoints": {
                "health": "/health",
                "create_server": "/createServer",
                "pool_list": "/poolList",
                "pool": "/pool",
                "pool_by_index": "/poolByIndex",
                "pool_count": "/poolCount",
                "index_list": "/generateIndexList",
                "control": "/control",
                "docs": "/docs"
            }
        }

    return app
