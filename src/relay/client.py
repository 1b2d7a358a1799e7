from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import asyncio
import logging
import time

import httpx

from .errors import UpstreamError
from .types import BackendSystem, PoolSnapshot, SnapshotResult, snapshot_order

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_MAX_CONCURRENCY = 8


class BackendClient:
    """
    Outbound HTTP access to registered backends.

    One pooled httpx.AsyncClient is shared by every request of an app
    instance. Each call carries the configured timeout; nothing is retried.
    """

    def __init__(
        self,
        request_timeout_s: float = DEFAULT_TIMEOUT_S,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.request_timeout_s = request_timeout_s
        self.max_concurrency = max_concurrency
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(request_timeout_s),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            transport=transport,
        )

    async def fetch_snapshot(self, system: BackendSystem) -> PoolSnapshot:
        t0 = time.perf_counter()
        try:
            response = await self.client.get(system.data_endpoint)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Timeout fetching data for '{system.name}' after {self.request_timeout_s}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"Backend '{system.name}' returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to '{system.name}' failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Backend '{system.name}' returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise UpstreamError(f"Backend '{system.name}' data is not an object")

        snapshot = snapshot_order(payload)
        logger.debug(f"fetched {len(snapshot)} pools from '{system.name}' in {(time.perf_counter() - t0) * 1000:.0f}ms")
        return snapshot

    async def fetch_all(self, systems: Iterable[BackendSystem]) -> List[SnapshotResult]:
        """
        Fetch every backend's snapshot with bounded concurrency.

        Results come back in the order the systems were given. A failing
        backend is logged and reported through SnapshotResult.error; this
        method itself never raises UpstreamError.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def safe_fetch(system: BackendSystem) -> SnapshotResult:
            async with semaphore:
                try:
                    return SnapshotResult(system=system, snapshot=await self.fetch_snapshot(system))
                except UpstreamError as e:
                    logger.error(f"Error fetching data for {system.name}: {e}")
                    return SnapshotResult(system=system, error=e)

        return list(await asyncio.gather(*(safe_fetch(s) for s in systems)))

    async def send_control(self, system: BackendSystem, payload: Dict[str, Any]) -> Any:
        if not system.control_endpoint:
            raise UpstreamError(f"Backend '{system.name}' has no control endpoint")

        try:
            response = await self.client.post(system.control_endpoint, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Timeout sending control to '{system.name}' after {self.request_timeout_s}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Backend '{system.name}' rejected control: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Control request to '{system.name}' failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        await self.client.aclose()
        logger.info("closed backend HTTP client")
