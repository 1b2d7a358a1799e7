"""
Access to the relay components owned by the running app.

The registry and backend client are created once by the app factory and
stored on `app.state`; these dependencies hand them to endpoints.
"""

from fastapi import Depends, Request

from src.relay.client import BackendClient
from src.relay.config import RelayConfig
from src.relay.registry import BackendRegistry
from src.pipeline.pools.aggregator import PoolAggregator
from src.pipeline.pools.locator import PoolLocator
from src.pipeline.pools.dispatcher import ControlDispatcher


def get_config(request: Request) -> RelayConfig:
    """FastAPI dependency to get the loaded relay configuration."""
    return request.app.state.config

def get_registry(request: Request) -> BackendRegistry:
    """FastAPI dependency to get the backend registry."""
    return request.app.state.registry

def get_backend_client(request: Request) -> BackendClient:
    """FastAPI dependency to get the shared outbound HTTP client."""
    return request.app.state.backend_client

def get_aggregator(
    registry: BackendRegistry = Depends(get_registry),
    client: BackendClient = Depends(get_backend_client)
) -> PoolAggregator:
    return PoolAggregator(registry, client)

def get_locator(
    registry: BackendRegistry = Depends(get_registry),
    client: BackendClient = Depends(get_backend_client)
) -> PoolLocator:
    return PoolLocator(registry, client)

def get_dispatcher(
    registry: BackendRegistry = Depends(get_registry),
    client: BackendClient = Depends(get_backend_client)
) -> ControlDispatcher:
    return ControlDispatcher(registry, client)

def callback_base_url(request: Request, config: RelayConfig = Depends(get_config)) -> str:
    """Base for the callback URLs in `/poolList`: configured public URL, else scheme and host of the request."""
    if config.server.public_base_url:
        return config.server.public_base_url.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"
