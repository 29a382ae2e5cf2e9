"""Contract tools: smart queries, contract and code metadata, known contracts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from secret_mcp.chain import ChainRegistry, CodeInfoCapable
from secret_mcp.config import load_known_contracts, network_tier_for_chain_id
from secret_mcp.errors import SecretMcpError
from secret_mcp.tools.definition import ToolDefinition, address_schema
from secret_mcp.tools.envelope import error_response, fail, ok
from secret_mcp.tools.validators import is_positive_int, is_valid_address, query_shape_error

logger = logging.getLogger(__name__)

TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="query_contract",
        description="Execute a query on a smart contract",
        input_schema={
            "type": "object",
            "properties": {
                "contractAddress": address_schema("Smart contract address"),
                "query": {
                    "type": "object",
                    "description": "Query object to send to the contract, e.g. {\"token_info\": {}}",
                },
            },
            "required": ["contractAddress", "query"],
        },
        category="contracts",
    ),
    ToolDefinition(
        name="get_contract_info",
        description="Get information about a smart contract (code ID, creator, admin, etc.)",
        input_schema={
            "type": "object",
            "properties": {"contractAddress": address_schema("Smart contract address")},
            "required": ["contractAddress"],
        },
        category="contracts",
    ),
    ToolDefinition(
        name="list_known_contracts",
        description="List known smart contracts for the current network",
        input_schema={
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "description": "Contract category (tokens, dex, etc.) - optional",
                },
            },
            "required": [],
        },
        category="contracts",
    ),
    ToolDefinition(
        name="get_contract_code_info",
        description="Get information about contract code by code ID",
        input_schema={
            "type": "object",
            "properties": {"codeId": {"type": "integer", "description": "Contract code ID", "minimum": 1}},
            "required": ["codeId"],
        },
        category="contracts",
    ),
]


async def query_contract(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    contract_address = args.get("contractAddress")
    query = args.get("query")
    if not is_valid_address(contract_address):
        return fail("Invalid contract address format")
    shape_error = query_shape_error(query)
    if shape_error:
        return fail(shape_error)
    try:
        result = await registry.get_active_chain().query_contract(contract_address, query)
    except Exception as exc:
        return error_response(exc, "query_contract")
    return ok({"contractAddress": contract_address, "query": query, "result": result})


async def get_contract_info(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    contract_address = args.get("contractAddress")
    if not is_valid_address(contract_address):
        return fail("Invalid contract address format")
    try:
        info = await registry.get_active_chain().get_contract_info(contract_address)
    except Exception as exc:
        return error_response(exc, "get_contract_info")
    return ok(info)


async def list_known_contracts(
    registry: ChainRegistry,
    args: Dict[str, Any],
    *,
    contracts_file: Optional[Path] = None,
) -> Dict[str, Any]:
    category = args.get("category")
    if category is not None and not isinstance(category, str):
        return fail("Category must be a string")
    try:
        known = load_known_contracts(contracts_file or registry.settings.contracts_file)
        network_info = await registry.get_active_network_info()
    except SecretMcpError as exc:
        logger.warning("Failed to load contract configuration: %s", exc)
        return fail("Failed to load contract configuration")
    except Exception:
        logger.exception("Unexpected error loading contract configuration")
        return fail("Failed to load contract configuration")

    network_key = network_tier_for_chain_id(network_info.chain_id)
    network_contracts = known.get(network_key) or {}
    if category and category in network_contracts:
        contracts = {category: network_contracts[category]}
    else:
        contracts = network_contracts
    return ok(
        {
            "network": network_key,
            "chainId": network_info.chain_id,
            "category": category or "all",
            "contracts": contracts,
        }
    )


async def get_contract_code_info(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    code_id = args.get("codeId")
    if not is_positive_int(code_id):
        return fail("Invalid code ID")
    try:
        chain = registry.get_active_chain()
        if not isinstance(chain, CodeInfoCapable):
            return fail("Contract code info queries not supported by current chain")
        info = await chain.get_code_info(code_id)
    except Exception as exc:
        return error_response(exc, "get_contract_code_info")
    return ok(info)


HANDLERS: Dict[str, Callable[[ChainRegistry, Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
    "query_contract": query_contract,
    "get_contract_info": get_contract_info,
    "list_known_contracts": list_known_contracts,
    "get_contract_code_info": get_contract_code_info,
}


async def handle_contract_tool(name: str, args: Dict[str, Any], registry: ChainRegistry) -> Dict[str, Any]:
    handler = HANDLERS.get(name)
    if handler is None:
        return fail(f"Unknown contract tool: {name}")
    return await handler(registry, args or {})
