from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import re

from .errors import InvalidRequest, UpstreamError

UNNAMED_POOL = "Unnamed Pool"

#keys JavaScript treats as array indices; Object.entries lists them first, ascending
_ARRAY_INDEX_RE = re.compile(r"0|[1-9][0-9]*")
_MAX_ARRAY_INDEX = 2**32 - 2


def as_text(value: Any, field_name: str) -> Optional[str]:
    """Identifier-like body value as a string; JSON numbers are accepted and stringified."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise InvalidRequest(f"Invalid {field_name}")


@dataclass(frozen=True)
class BackendSystem:
    name: str
    data_endpoint: str
    control_endpoint: Optional[str] = None #may be omitted at registration


@dataclass(frozen=True)
class PoolRecord:
    name: Any = None #backends are not consistent about types, pass through as sent
    status: Any = None
    devices: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Any) -> "PoolRecord":
        if not isinstance(raw, dict):
            raise UpstreamError(f"Pool record is not an object: {raw!r}")
        devices = raw.get("devices") or {}
        if not isinstance(devices, dict):
            raise UpstreamError(f"Pool devices is not an object: {devices!r}")
        return cls(name=raw.get("name"), status=raw.get("status"), devices=dict(devices))

    def detail(self, system_id: str) -> Dict[str, Any]:
        """Flatten into the `/pool` shape; device keys override the fixed fields."""
        return {
            "systemId": system_id,
            "name": self.name,
            "status": self.status,
            **self.devices,
        }


#identifier -> raw record as sent; records are validated when projected
PoolSnapshot = Dict[str, Any]


def _is_array_index(key: str) -> bool:
    return bool(_ARRAY_INDEX_RE.fullmatch(key)) and int(key) <= _MAX_ARRAY_INDEX


def snapshot_order(payload: Dict[str, Any]) -> PoolSnapshot:
    """
    Reorder a decoded data payload the way JavaScript iterates objects.

    Integer-like keys come first in ascending numeric order, then the
    remaining keys in document order. Positional lookups depend on this.
    """
    indexed = sorted((k for k in payload if _is_array_index(k)), key=int)
    named = [k for k in payload if not _is_array_index(k)]
    return {k: payload[k] for k in indexed + named}


@dataclass(frozen=True)
class PoolSummary:
    system_id: str
    name: Any
    status: Any
    data_endpoint: str
    control_endpoint: str

    @classmethod
    def build(cls, system_id: str, record: PoolRecord, base_url: str) -> "PoolSummary":
        base = base_url.rstrip("/")
        return cls(
            system_id=system_id,
            name=record.name or UNNAMED_POOL,
            status=record.status,
            data_endpoint=f"{base}/pool?{urlencode({'systemId': system_id})}",
            control_endpoint=f"{base}/control",
        )


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of one backend fetch during a fan-out; exactly one of snapshot/error is set."""
    system: BackendSystem
    snapshot: Optional[PoolSnapshot] = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
