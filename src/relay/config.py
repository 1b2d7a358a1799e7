from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import os
import logging

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    public_base_url: Optional[str] = None #overrides the callback base taken from the request
    cors_origins: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BackendConfig:
    request_timeout_s: float = 10.0
    max_concurrency: int = 8


@dataclass(frozen=True)
class SeedBackend:
    username: str
    api_url: str
    control_url: Optional[str] = None


@dataclass(frozen=True)
class RelayConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    backends: BackendConfig = field(default_factory=BackendConfig)
    seed_backends: List[SeedBackend] = field(default_factory=list)
    log_level: str = "INFO"


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def _parse_seeds(registry: Dict[str, Any]) -> List[SeedBackend]:
    entries = registry.get("backends")
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError("Config 'registry.backends' must be a list")

    seeds = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Seed backend #{i} must be a mapping")
        if not entry.get("username") or not entry.get("apiUrl"):
            raise ValueError(f"Seed backend #{i} missing username or apiUrl")
        seeds.append(SeedBackend(
            username=entry["username"],
            api_url=entry["apiUrl"],
            control_url=entry.get("controlUrl"),
        ))
    return seeds


def load_config(config_path: Union[Path, str, None] = None) -> RelayConfig:
    path = Path(config_path or os.environ.get("RELAY_CONFIG") or DEFAULT_CONFIG_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path) as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping: {path}")

    server = _section(config, "server")
    backends = _section(config, "backends")
    registry = _section(config, "registry")
    logging_cfg = _section(config, "logging")

    port = server.get("port", ServerConfig.port)
    if os.environ.get("PORT"):
        port = os.environ["PORT"]

    timeout = float(backends.get("request_timeout_s", BackendConfig.request_timeout_s))
    if timeout <= 0:
        raise ValueError("backends.request_timeout_s must be positive")
    max_concurrency = int(backends.get("max_concurrency", BackendConfig.max_concurrency))
    if max_concurrency < 1:
        raise ValueError("backends.max_concurrency must be at least 1")

    relay_config = RelayConfig(
        server=ServerConfig(
            host=server.get("host", ServerConfig.host),
            port=int(port),
            public_base_url=server.get("public_base_url"),
            cors_origins=list(server.get("cors_origins") or []),
        ),
        backends=BackendConfig(request_timeout_s=timeout, max_concurrency=max_concurrency),
        seed_backends=_parse_seeds(registry),
        log_level=str(logging_cfg.get("level", "INFO")).upper(),
    )
    logger.info(f"loaded config from {path}")
    return relay_config
