"""Network tools: chain status, blocks and transactions."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List

from secret_mcp.chain import ChainRegistry
from secret_mcp.models import BlockInfo
from secret_mcp.tools.definition import TX_HASH_PATTERN, ToolDefinition
from secret_mcp.tools.envelope import error_response, fail, ok
from secret_mcp.tools.validators import (
    is_int_in_range,
    is_positive_int,
    is_valid_transaction_hash,
)

logger = logging.getLogger(__name__)

MAX_LATEST_BLOCKS = 20
DEFAULT_LATEST_BLOCKS = 5

TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="get_network_status",
        description="Get current network status including latest block height, validator count, and bonded tokens",
        input_schema={"type": "object", "properties": {}, "required": []},
        category="network",
    ),
    ToolDefinition(
        name="get_block_info",
        description="Get detailed information about a specific block by height",
        input_schema={
            "type": "object",
            "properties": {
                "height": {"type": "integer", "description": "Block height to query", "minimum": 1},
            },
            "required": ["height"],
        },
        category="network",
    ),
    ToolDefinition(
        name="get_transaction_info",
        description="Get detailed information about a transaction by hash",
        input_schema={
            "type": "object",
            "properties": {
                "hash": {
                    "type": "string",
                    "description": "Transaction hash to query (64 character hex string)",
                    "pattern": TX_HASH_PATTERN,
                },
            },
            "required": ["hash"],
        },
        category="network",
    ),
    ToolDefinition(
        name="get_latest_blocks",
        description="Get information about the latest N blocks",
        input_schema={
            "type": "object",
            "properties": {
                "count": {
                    "type": "integer",
                    "description": f"Number of latest blocks to retrieve (max {MAX_LATEST_BLOCKS})",
                    "minimum": 1,
                    "maximum": MAX_LATEST_BLOCKS,
                },
            },
            "required": ["count"],
        },
        category="network",
    ),
]


async def get_network_status(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    try:
        status = await registry.get_active_chain().get_network_status()
    except Exception as exc:
        return error_response(exc, "get_network_status")
    return ok(status)


async def get_block_info(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    height = args.get("height")
    if not is_positive_int(height):
        return fail("Invalid block height")
    try:
        block = await registry.get_active_chain().get_block_info(height)
    except Exception as exc:
        return error_response(exc, "get_block_info")
    return ok(block)


async def get_transaction_info(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    tx_hash = args.get("hash")
    if not is_valid_transaction_hash(tx_hash):
        return fail("Invalid transaction hash format")
    try:
        tx = await registry.get_active_chain().get_transaction_info(tx_hash)
    except Exception as exc:
        return error_response(exc, "get_transaction_info")
    return ok(tx)


async def get_latest_blocks(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    count = args.get("count", DEFAULT_LATEST_BLOCKS)
    if not is_int_in_range(count, minimum=1, maximum=MAX_LATEST_BLOCKS):
        return fail(f"Count must be between 1 and {MAX_LATEST_BLOCKS}")
    try:
        chain = registry.get_active_chain()
        latest_height = (await chain.get_network_status()).latest_block_height
        blocks: List[BlockInfo] = []
        for offset in range(count):
            height = latest_height - offset
            # Short chains yield fewer blocks; height 0 and below are never queried.
            if height <= 0:
                break
            blocks.append(await chain.get_block_info(height))
    except Exception as exc:
        return error_response(exc, "get_latest_blocks")
    return ok({"blocks": blocks, "totalCount": len(blocks), "latestHeight": latest_height})


HANDLERS: Dict[str, Callable[[ChainRegistry, Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
    "get_network_status": get_network_status,
    "get_block_info": get_block_info,
    "get_transaction_info": get_transaction_info,
    "get_latest_blocks": get_latest_blocks,
}


async def handle_network_tool(name: str, args: Dict[str, Any], registry: ChainRegistry) -> Dict[str, Any]:
    handler = HANDLERS.get(name)
    if handler is None:
        return fail(f"Unknown network tool: {name}")
    return await handler(registry, args or {})
