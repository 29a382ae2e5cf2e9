"""Minimal live sanity checks for the Secret Network MCP tools."""

from __future__ import annotations

import asyncio
import json
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from secret_mcp import mcp  # noqa: E402
from secret_mcp.config import ServerConfig  # noqa: E402
from secret_mcp.service import build_registry, configure_logging  # noqa: E402

# sSCRT on mainnet; override via env for testnet runs.
SAMPLE_CONTRACT = os.getenv("SECRET_SAMPLE_CONTRACT", "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek")
# Optional wallet for a bank balance lookup.
SAMPLE_ADDRESS = os.getenv("SECRET_SAMPLE_ADDRESS")
# Opt-in to the encrypted contract query (plain LCD queries may be rejected).
RUN_CONTRACT_QUERY = os.getenv("RUN_CONTRACT_SANITY", "false").lower() in {"1", "true", "yes"}


async def show(registry, name: str, arguments: dict) -> None:
    result = await mcp.call_tool(name, arguments, registry)
    print(f"{name}:", json.dumps(result, indent=2))


async def main() -> None:
    config = ServerConfig()
    configure_logging(config)
    registry = build_registry(config)
    await registry.initialize(config.network, overrides=config.overrides)
    try:
        await show(registry, "get_network_status", {})
        await show(registry, "get_latest_blocks", {"count": 3})
        await show(registry, "get_contract_info", {"contractAddress": SAMPLE_CONTRACT})
        await show(registry, "list_known_tokens", {})
        if SAMPLE_ADDRESS:
            await show(registry, "get_token_balance", {"address": SAMPLE_ADDRESS})
        if RUN_CONTRACT_QUERY:
            await show(registry, "get_snip20_token_info", {"contractAddress": SAMPLE_CONTRACT})
    finally:
        await registry.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
