"""STDIO transport for MCP JSON-RPC (one message per line)."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from secret_mcp import mcp
from secret_mcp.chain import ChainRegistry
from secret_mcp.config import ServerConfig
from secret_mcp.service import start_chain

logger = logging.getLogger(__name__)


async def serve_lines(
    registry: ChainRegistry,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Answer JSON-RPC lines from ``stdin`` until EOF."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            request = json.loads(line)
        except json.JSONDecodeError as exc:
            response: Optional[Dict[str, Any]] = mcp.jsonrpc_error(None, -32700, f"Parse error: {exc}")
        else:
            response = await mcp.handle_jsonrpc(request, registry)
        if response is None:
            continue
        stdout.write(json.dumps(response, ensure_ascii=True) + "\n")
        stdout.flush()


async def run_stdio(registry: ChainRegistry, config: ServerConfig) -> int:
    await start_chain(registry, config)
    logger.info("Secret Network MCP server started transport=stdio network=%s", config.network)
    try:
        await serve_lines(registry)
    finally:
        await registry.shutdown()
    return 0
