"""
Pool registration and lookup endpoints.

Paths and query parameter names match the relay's existing clients, so they
stay camelCase and are mounted at the application root.
"""

from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, List, Optional

from ..errors import http_error
from ..models.common import APIResponse, ERROR_RESPONSES
from ..models.pools import CreateServerRequest, PoolSummaryModel, PoolCountResponse
from ..dependencies.relay import get_registry, get_aggregator, get_locator, callback_base_url
from src.relay.errors import RelayError
from src.relay.registry import BackendRegistry
from src.pipeline.pools.aggregator import PoolAggregator
from src.pipeline.pools.locator import PoolLocator

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/createServer", response_model=APIResponse)
async def create_server(
    request: Optional[CreateServerRequest] = Body(None),
    registry: BackendRegistry = Depends(get_registry)
):
    """
    Register a pool system.

    Registering an existing username succeeds without changing the
    stored endpoints.
    """
    if request is None:
        request = CreateServerRequest()
    try:
        registry.register(request.username, request.api_url, request.control_url)
    except RelayError as e:
        raise http_error(e) from e
    return APIResponse(success=True, message="Pool system registered")


@router.get("/poolList", response_model=List[PoolSummaryModel])
async def pool_list(
    base_url: str = Depends(callback_base_url),
    aggregator: PoolAggregator = Depends(get_aggregator)
):
    """Flattened list of all pools across every reachable backend."""
    summaries = await aggregator.list_all_pools(base_url)
    return [PoolSummaryModel.from_summary(s) for s in summaries]


@router.get("/pool")
async def get_pool(
    systemId: Optional[str] = None,
    locator: PoolLocator = Depends(get_locator)
) -> Dict[str, Any]:
    """Live data for one pool, searched across all backends."""
    try:
        _, record = await locator.find_pool_by_id(systemId)
    except RelayError as e:
        raise http_error(e) from e
    return record.detail(systemId)


@router.get("/poolByIndex")
async def get_pool_by_index(
    server: Optional[str] = None,
    index: Optional[str] = None,
    locator: PoolLocator = Depends(get_locator)
) -> Dict[str, Any]:
    """Live data for the pool at a position in one backend's snapshot."""
    try:
        system_id, record = await locator.find_pool_by_index(server, index)
    except RelayError as e:
        raise http_error(e, upstream_detail="Failed to fetch pool data") from e
    return record.detail(system_id)


@router.get("/poolCount", response_model=PoolCountResponse)
async def pool_count(
    server: Optional[str] = None,
    locator: PoolLocator = Depends(get_locator)
):
    try:
        count = await locator.count_pools(server)
    except RelayError as e:
        raise http_error(e, upstream_detail="Failed to fetch pool data") from e
    return PoolCountResponse(count=count)


@router.get("/generateIndexList", response_model=List[int])
async def generate_index_list(
    server: Optional[str] = None,
    locator: PoolLocator = Depends(get_locator)
):
    """Valid `index` values for `/poolByIndex` on this server."""
    try:
        return await locator.index_range(server)
    except RelayError as e:
        raise http_error(e, upstream_detail="Failed to fetch pool data") from e
