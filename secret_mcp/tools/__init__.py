"""LLM-facing tool implementations, grouped by category."""

from .contracts import handle_contract_tool
from .network import handle_network_tool
from .tokens import handle_token_tool
from . import contracts, network, tokens, validators

CATEGORIES = {
    "network": (network.TOOLS, handle_network_tool),
    "tokens": (tokens.TOOLS, handle_token_tool),
    "contracts": (contracts.TOOLS, handle_contract_tool),
}

__all__ = [
    "CATEGORIES",
    "handle_contract_tool",
    "handle_network_tool",
    "handle_token_tool",
    "validators",
]
