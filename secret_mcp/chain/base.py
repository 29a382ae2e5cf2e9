"""
Chain query contract and optional capability interfaces.

Every adapter implements ``ChainClient``. Extensions are separate ABCs that an
adapter either inherits or omits; callers test for them with ``isinstance``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from secret_mcp.models import (
    BlockInfo,
    CodeInfo,
    ContractInfo,
    NetworkConfig,
    NetworkStatus,
    TokenBalance,
    TransactionInfo,
)


class ChainClient(ABC):
    """Portable read-only query contract."""

    @abstractmethod
    async def get_network_status(self) -> NetworkStatus:
        """Fresh chain status; raises ``NetworkError`` once retries are exhausted."""

    @abstractmethod
    async def get_block_info(self, height: int) -> BlockInfo:
        """Block at ``height``; raises ``NotFoundError`` if absent."""

    @abstractmethod
    async def get_transaction_info(self, tx_hash: str) -> TransactionInfo:
        """Transaction by 64-char hex hash; raises ``NotFoundError`` if unknown."""

    @abstractmethod
    async def get_token_balance(self, address: str, denom: Optional[str] = None) -> List[TokenBalance]:
        """Bank balances for ``address``; empty list when it holds nothing."""

    @abstractmethod
    async def query_contract(self, contract_address: str, query: Dict[str, Any]) -> Any:
        """Smart query passthrough; raises ``ContractError`` on rejection."""

    @abstractmethod
    async def get_contract_info(self, contract_address: str) -> ContractInfo:
        """Contract metadata; raises ``NotFoundError`` if nothing is deployed."""

    async def aclose(self) -> None:
        """Release transport resources."""
        return None


class SupportsHealthCheck(ABC):
    @abstractmethod
    async def is_healthy(self) -> bool:
        ...


class SupportsNetworkConfig(ABC):
    @abstractmethod
    def get_network_config(self) -> NetworkConfig:
        ...


class Snip20Capable(ABC):
    """SNIP-20 token queries."""

    @abstractmethod
    async def get_snip20_token_info(self, contract_address: str) -> Any:
        ...

    @abstractmethod
    async def get_snip20_balance(self, contract_address: str, address: str, viewing_key: str) -> Any:
        """Private balance query authorized by a viewing key."""


class CodeInfoCapable(ABC):
    @abstractmethod
    async def get_code_info(self, code_id: int) -> CodeInfo:
        ...
