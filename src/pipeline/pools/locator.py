import re
import logging
from typing import List, Optional, Tuple, Union

from src.relay.client import BackendClient
from src.relay.errors import InvalidRequest, NotFound, IndexOutOfRange, UpstreamError
from src.relay.registry import BackendRegistry
from src.relay.types import BackendSystem, PoolRecord, PoolSnapshot

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"[0-9]+")


def parse_index(index: Union[str, int]) -> int:
    """Zero-based position from a query value; anything but a plain non-negative integer is out of range."""
    if isinstance(index, bool):
        raise IndexOutOfRange("Index out of range")
    if isinstance(index, int):
        if index < 0:
            raise IndexOutOfRange("Index out of range")
        return index
    if not _INDEX_RE.fullmatch(str(index).strip()):
        raise IndexOutOfRange("Index out of range")
    return int(str(index).strip())


class PoolLocator:
    def __init__(self, registry: BackendRegistry, client: BackendClient):
        self.registry = registry
        self.client = client

    async def find_pool_by_id(self, system_id: Optional[str]) -> Tuple[BackendSystem, PoolRecord]:
        """
        Search every backend for a pool identifier.

        The first backend in registration order holding the identifier wins.
        Backends that fail to answer, and empty or malformed records, are
        treated as not holding it.
        """
        if not system_id:
            raise InvalidRequest("Missing systemId")

        for result in await self.client.fetch_all(self.registry.list_systems()):
            if not result.ok or not result.snapshot.get(system_id):
                continue
            try:
                return result.system, PoolRecord.from_json(result.snapshot[system_id])
            except UpstreamError as e:
                logger.warning(f"ignoring malformed pool {system_id} from {result.system.name}: {e}")

        raise NotFound("Pool not found")

    async def find_pool_by_index(
        self, server: Optional[str], index: Union[str, int, None]
    ) -> Tuple[str, PoolRecord]:
        if not server or index is None or index == "":
            raise InvalidRequest("Missing server or index")

        snapshot = await self._snapshot_for(server)
        position = parse_index(index)
        entries = list(snapshot.items())
        if position >= len(entries):
            logger.info(f"index {position} out of range for '{server}' ({len(entries)} pools)")
            raise IndexOutOfRange("Index out of range")
        system_id, raw = entries[position]
        try:
            return system_id, PoolRecord.from_json(raw)
        except UpstreamError as e:
            logger.error(f"Malformed pool at index {position} from '{server}': {e}")
            raise

    async def count_pools(self, server: Optional[str]) -> int:
        if not server:
            raise InvalidRequest("Missing server")
        return len(await self._snapshot_for(server))

    async def index_range(self, server: Optional[str]) -> List[int]:
        return list(range(await self.count_pools(server)))

    async def _snapshot_for(self, server: str) -> PoolSnapshot:
        system = self.registry.find_by_name(server)
        if system is None:
            raise NotFound("Server not found")
        try:
            return await self.client.fetch_snapshot(system)
        except UpstreamError as e:
            logger.error(f"Failed to fetch pool data from '{server}': {e}")
            raise
