import logging
from typing import Any, Optional

from src.relay.client import BackendClient
from src.relay.errors import InvalidRequest, NotFound, UpstreamError
from src.relay.registry import BackendRegistry
from src.relay.types import BackendSystem, as_text

logger = logging.getLogger(__name__)

#length of the identifier prefix matched against data endpoints
CORRELATION_PREFIX_LEN = 6


class ControlDispatcher:
    def __init__(self, registry: BackendRegistry, client: BackendClient):
        self.registry = registry
        self.client = client

    def resolve_backend(self, system_id: str) -> Optional[BackendSystem]:
        """
        First backend whose data endpoint contains the identifier's prefix.

        This is a heuristic correlation, not a key lookup: similarly named
        backends can shadow each other, and registration order decides.
        """
        prefix = system_id[:CORRELATION_PREFIX_LEN]
        for system in self.registry.list_systems():
            if prefix in system.data_endpoint:
                return system
        return None

    async def send_control(self, system_id: Any, action: Any, value: Any = None) -> Any:
        if not system_id or not action:
            raise InvalidRequest("Missing systemId or action")
        system_id = as_text(system_id, "systemId")

        system = self.resolve_backend(system_id)
        if system is None:
            raise NotFound("System not found")

        logger.info(f"forwarding '{action}' for {system_id} to '{system.name}'")
        try:
            return await self.client.send_control(
                system, {"systemId": system_id, "action": action, "value": value}
            )
        except UpstreamError as e:
            logger.error(f"Failed to send control command to '{system.name}': {e}")
            raise
