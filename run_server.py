#!/usr/bin/env python3
"""
Server launcher for the pool relay.

Reads config/config.yaml (or the file named by --config / RELAY_CONFIG) for
host, port and log level, then serves the FastAPI app with uvicorn.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

# Add project root to Python path so `src.` imports work correctly
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from src.relay.config import load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the pool relay API server")
    parser.add_argument("--config", help="Path to config YAML (default: config/config.yaml)")
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development only)")
    args = parser.parse_args()

    if args.config:
        # The app factory runs inside uvicorn and reads the path from here
        os.environ["RELAY_CONFIG"] = str(Path(args.config).resolve())

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    logging.getLogger(__name__).info(f"Starting pool relay on http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        "src.api.main:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=args.reload,
        reload_dirs=[str(project_root / "src")] if args.reload else None,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
