"""Token tools: bank balances, SNIP-20 queries and the known-token table."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from secret_mcp.chain import ChainRegistry, Snip20Capable
from secret_mcp.config import load_known_contracts, network_tier_for_chain_id
from secret_mcp.errors import SecretMcpError
from secret_mcp.models import TokenBalance
from secret_mcp.tools.definition import ToolDefinition, address_schema
from secret_mcp.tools.envelope import error_response, fail, ok
from secret_mcp.tools.validators import (
    VIEWING_KEY_MIN_LENGTH,
    format_token_amount,
    is_valid_address,
    is_valid_viewing_key,
)

logger = logging.getLogger(__name__)

TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="get_token_balance",
        description="Get token balance for an address (SCRT or specific denom)",
        input_schema={
            "type": "object",
            "properties": {
                "address": address_schema("Secret Network address (secret1...)"),
                "denom": {
                    "type": "string",
                    "description": "Token denomination (optional, defaults to all balances)",
                },
            },
            "required": ["address"],
        },
        category="tokens",
    ),
    ToolDefinition(
        name="get_snip20_token_info",
        description="Get SNIP-20 token information (name, symbol, decimals, total supply)",
        input_schema={
            "type": "object",
            "properties": {"contractAddress": address_schema("SNIP-20 contract address")},
            "required": ["contractAddress"],
        },
        category="tokens",
    ),
    ToolDefinition(
        name="get_snip20_balance",
        description="Get SNIP-20 token balance for an address with viewing key",
        input_schema={
            "type": "object",
            "properties": {
                "contractAddress": address_schema("SNIP-20 contract address"),
                "address": address_schema("Wallet address to check balance for"),
                "viewingKey": {
                    "type": "string",
                    "description": "Viewing key for private balance query",
                    "minLength": VIEWING_KEY_MIN_LENGTH,
                },
            },
            "required": ["contractAddress", "address", "viewingKey"],
        },
        category="tokens",
    ),
    ToolDefinition(
        name="list_known_tokens",
        description="List known tokens and their contract addresses for the current network",
        input_schema={"type": "object", "properties": {}, "required": []},
        category="tokens",
    ),
]


def _render_balance(balance: TokenBalance) -> Dict[str, Any]:
    rendered = balance.to_dict()
    if balance.decimals is not None:
        try:
            rendered["formatted"] = format_token_amount(balance.amount, balance.decimals)
        except SecretMcpError:
            logger.debug("Unformattable amount %s for %s", balance.amount, balance.denom)
    return rendered


async def get_token_balance(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    address = args.get("address")
    denom = args.get("denom")
    if not is_valid_address(address):
        return fail("Invalid Secret Network address format")
    if denom is not None and not isinstance(denom, str):
        return fail("Denom must be a string")
    try:
        balances = await registry.get_active_chain().get_token_balance(address, denom or None)
        rendered = [_render_balance(balance) for balance in balances]
    except Exception as exc:
        return error_response(exc, "get_token_balance")
    return ok({"address": address, "balances": rendered, "totalBalances": len(rendered)})


async def get_snip20_token_info(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    contract_address = args.get("contractAddress")
    if not is_valid_address(contract_address):
        return fail("Invalid contract address format")
    try:
        chain = registry.get_active_chain()
        if not isinstance(chain, Snip20Capable):
            return fail("SNIP-20 queries not supported by current chain")
        token_info = await chain.get_snip20_token_info(contract_address)
    except Exception as exc:
        return error_response(exc, "get_snip20_token_info")
    return ok({"contractAddress": contract_address, "tokenInfo": token_info})


async def get_snip20_balance(registry: ChainRegistry, args: Dict[str, Any]) -> Dict[str, Any]:
    contract_address = args.get("contractAddress")
    address = args.get("address")
    viewing_key = args.get("viewingKey")
    if not is_valid_address(contract_address):
        return fail("Invalid contract address format")
    if not is_valid_address(address):
        return fail("Invalid wallet address format")
    if not is_valid_viewing_key(viewing_key):
        return fail("Invalid viewing key")
    try:
        chain = registry.get_active_chain()
        if not isinstance(chain, Snip20Capable):
            return fail("SNIP-20 balance queries not supported by current chain")
        balance = await chain.get_snip20_balance(contract_address, address, viewing_key)
    except Exception as exc:
        return error_response(exc, "get_snip20_balance")
    return ok({"contractAddress": contract_address, "address": address, "balance": balance})


async def list_known_tokens(
    registry: ChainRegistry,
    args: Dict[str, Any],
    *,
    contracts_file: Optional[Path] = None,
) -> Dict[str, Any]:
    try:
        known = load_known_contracts(contracts_file or registry.settings.contracts_file)
        network_info = await registry.get_active_network_info()
    except SecretMcpError as exc:
        logger.warning("Failed to load token configuration: %s", exc)
        return fail("Failed to load token configuration")
    except Exception:
        logger.exception("Unexpected error loading token configuration")
        return fail("Failed to load token configuration")
    network_key = network_tier_for_chain_id(network_info.chain_id)
    tokens = (known.get(network_key) or {}).get("tokens") or {}
    return ok(
        {
            "network": network_key,
            "chainId": network_info.chain_id,
            "tokens": tokens,
            "tokenCount": len(tokens),
        }
    )


HANDLERS: Dict[str, Callable[[ChainRegistry, Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
    "get_token_balance": get_token_balance,
    "get_snip20_token_info": get_snip20_token_info,
    "get_snip20_balance": get_snip20_balance,
    "list_known_tokens": list_known_tokens,
}


async def handle_token_tool(name: str, args: Dict[str, Any], registry: ChainRegistry) -> Dict[str, Any]:
    handler = HANDLERS.get(name)
    if handler is None:
        return fail(f"Unknown token tool: {name}")
    return await handler(registry, args or {})
