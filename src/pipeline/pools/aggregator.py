import logging
from typing import List

from src.relay.client import BackendClient
from src.relay.errors import UpstreamError
from src.relay.registry import BackendRegistry
from src.relay.types import PoolRecord, PoolSummary

logger = logging.getLogger(__name__)


class PoolAggregator:
    def __init__(self, registry: BackendRegistry, client: BackendClient):
        self.registry = registry
        self.client = client

    async def list_all_pools(self, base_url: str) -> List[PoolSummary]:
        """
        Flatten every reachable backend's snapshot into pool summaries.

        Backends are visited in registration order. One that cannot be
        fetched contributes nothing, and a malformed record is dropped on its
        own; the call itself never fails.
        """
        results = await self.client.fetch_all(self.registry.list_systems())

        summaries: List[PoolSummary] = []
        for result in results:
            if not result.ok:
                continue
            for system_id, raw in result.snapshot.items():
                try:
                    record = PoolRecord.from_json(raw)
                except UpstreamError as e:
                    logger.warning(f"skipping pool {system_id} from {result.system.name}: {e}")
                    continue
                summaries.append(PoolSummary.build(system_id, record, base_url))

        skipped = sum(1 for r in results if not r.ok)
        logger.info(f"aggregated {len(summaries)} pools from {len(results) - skipped} backends ({skipped} skipped)")
        return summaries
