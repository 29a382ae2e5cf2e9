"""Deterministic stand-in used when live connectivity is unavailable and allowed."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from secret_mcp.chain.base import ChainClient
from secret_mcp.chain.normalize import utc_now_iso
from secret_mcp.config import MAINNET_CHAIN_ID, TESTNET_CHAIN_ID
from secret_mcp.errors import UnsupportedCapabilityError
from secret_mcp.models import (
    BlockInfo,
    ContractInfo,
    NetworkStatus,
    TokenBalance,
    TransactionInfo,
)


class OfflineChain(ChainClient):
    """Returns zero/empty values for every query; contract queries always fail."""

    def __init__(self, network: str = "mainnet") -> None:
        self.network = network
        self.chain_id = MAINNET_CHAIN_ID if network == "mainnet" else TESTNET_CHAIN_ID

    async def get_network_status(self) -> NetworkStatus:
        return NetworkStatus(
            chain_id=self.chain_id,
            latest_block_height=0,
            latest_block_time=utc_now_iso(),
            validator_count=0,
            bonded_tokens="0",
            inflation=0.0,
        )

    async def get_block_info(self, height: int) -> BlockInfo:
        return BlockInfo(height=height, hash="", time=utc_now_iso(), proposer="", tx_count=0)

    async def get_transaction_info(self, tx_hash: str) -> TransactionInfo:
        return TransactionInfo(
            hash=tx_hash,
            height=0,
            index=0,
            code=0,
            gas_used="0",
            gas_wanted="0",
            fee="0",
            timestamp=utc_now_iso(),
            memo="",
        )

    async def get_token_balance(self, address: str, denom: Optional[str] = None) -> List[TokenBalance]:
        return []

    async def query_contract(self, contract_address: str, query: Dict[str, Any]) -> Any:
        raise UnsupportedCapabilityError(
            "Contract queries not available in offline mode", operation="query_contract"
        )

    async def get_contract_info(self, contract_address: str) -> ContractInfo:
        raise UnsupportedCapabilityError(
            "Contract info not available in offline mode", operation="get_contract_info"
        )
