"""Command-line entry point: ``python -m secret_mcp [--transport stdio|http]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from secret_mcp.config import ServerConfig
from secret_mcp.errors import ChainInitializationError
from secret_mcp.service import build_registry, configure_logging

logger = logging.getLogger("secret_mcp")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="secret-mcp", description="Read-only Secret Network MCP server")
    parser.add_argument("--transport", choices=("stdio", "http"), default="stdio")
    parser.add_argument("--network", help="Network tier (mainnet or testnet)")
    parser.add_argument("--host", help="HTTP bind host")
    parser.add_argument("--port", type=int, help="HTTP bind port")
    parser.add_argument("--allow-offline", action="store_true", help="Fall back to offline mock data")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    config = ServerConfig()
    if args.network:
        config.network = args.network
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.allow_offline:
        config.allow_offline_mode = True
    configure_logging(config)

    if args.transport == "http":
        import uvicorn

        from secret_mcp.server import create_app

        uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
        return 0

    from secret_mcp.stdio import run_stdio

    try:
        return asyncio.run(run_stdio(build_registry(config), config))
    except ChainInitializationError as exc:
        logger.error("Failed to start server: %s", exc)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
