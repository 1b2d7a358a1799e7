"""
Health check endpoints for monitoring and diagnostics.

These endpoints report the relay's own state only; they never call out to
registered backends.
"""

import time
from fastapi import APIRouter, Depends
from datetime import datetime

from ..models.common import HealthStatus
from ..dependencies.relay import get_registry, get_backend_client, get_config
from src.relay.client import BackendClient
from src.relay.config import RelayConfig
from src.relay.registry import BackendRegistry

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()

API_VERSION = "1.0.0"

@router.get("/", response_model=HealthStatus)
async def health_check(
    registry: BackendRegistry = Depends(get_registry),
    client: BackendClient = Depends(get_backend_client)
):
    """
    Basic health check endpoint.

    Returns the status of the API and its internal components.
    Useful for load balancers and monitoring systems.
    """

    uptime = time.time() - _server_start_time

    dependencies = {}
    stats = registry.get_stats()
    dependencies["registry"] = f"{stats['registered_backends']} backends registered"
    dependencies["backend_client"] = "closed" if client.client.is_closed else "open"

    return HealthStatus(
        status="healthy",
        version=API_VERSION,
        uptime=uptime,
        dependencies=dependencies
    )

@router.get("/detailed")
async def detailed_health_check(
    registry: BackendRegistry = Depends(get_registry),
    config: RelayConfig = Depends(get_config)
):
    """
    Detailed health check with registry contents and outbound settings.
    """

    uptime = time.time() - _server_start_time

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "uptime_seconds": uptime,
        "uptime_human": f"{uptime//3600:.0f}h {(uptime%3600)//60:.0f}m {uptime%60:.0f}s",
        "registry": {
            "backends": [s.name for s in registry.list_systems()],
        },
        "outbound": {
            "request_timeout_s": config.backends.request_timeout_s,
            "max_concurrency": config.backends.max_concurrency
        }
    }

@router.get("/ready")
async def readiness_check(client: BackendClient = Depends(get_backend_client)):
    """
    Readiness check for container deployments.

    The relay is ready as long as its outbound client is open; an empty
    registry is a valid state.
    """

    if client.client.is_closed:
        return {"ready": False, "reason": "Backend client closed"}

    return {"ready": True, "message": "Service ready to handle requests"}
