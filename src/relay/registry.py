"""
In-memory registry of pool-control backends.

Entries are append-only: there is no update and no deregistration, and
everything is lost when the process exits.
"""

import logging
import threading
from typing import Dict, List, Optional, Any

from .errors import InvalidRequest
from .types import BackendSystem, as_text

logger = logging.getLogger(__name__)


class BackendRegistry:
    """
    Thread-safe list of registered backends, keyed by unique name.

    Registration order is preserved; lookups and fan-outs walk the entries
    in that order.
    """

    def __init__(self):
        self._systems: List[BackendSystem] = []
        self._lock = threading.Lock()

    def register(
        self,
        name: Any,
        data_endpoint: Any,
        control_endpoint: Any = None
    ) -> bool:
        """
        Insert a backend unless one with the same name exists.

        Returns True when a new entry was appended. A duplicate name is a
        silent no-op: the first registration's endpoints are kept. JSON
        numbers are accepted and stored as strings.
        """
        if not name or not data_endpoint:
            raise InvalidRequest("Missing required fields")
        name = as_text(name, "username")
        data_endpoint = as_text(data_endpoint, "apiUrl")
        control_endpoint = as_text(control_endpoint, "controlUrl")

        with self._lock:
            if self._find(name) is not None:
                logger.info(f"backend '{name}' already registered, keeping existing entry")
                return False
            self._systems.append(BackendSystem(
                name=name,
                data_endpoint=data_endpoint,
                control_endpoint=control_endpoint or None,
            ))

        logger.info(f"registered backend '{name}' -> {data_endpoint}")
        return True

    def find_by_name(self, name: str) -> Optional[BackendSystem]:
        with self._lock:
            return self._find(name)

    def list_systems(self) -> List[BackendSystem]:
        """Snapshot of the entries in registration order."""
        with self._lock:
            return list(self._systems)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"registered_backends": len(self._systems)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._systems)

    def _find(self, name: str) -> Optional[BackendSystem]:
        """First entry with this name (called with lock held)."""
        for system in self._systems:
            if system.name == name:
                return system
        return None
