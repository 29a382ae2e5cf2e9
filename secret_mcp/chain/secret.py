"""Secret Network adapter implementing the chain query contract over the LCD API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from secret_mcp.chain.base import (
    ChainClient,
    CodeInfoCapable,
    Snip20Capable,
    SupportsHealthCheck,
    SupportsNetworkConfig,
)
from secret_mcp.chain.normalize import (
    normalize_bytes,
    normalize_timestamp,
    to_amount,
    to_float,
    to_int,
)
from secret_mcp.errors import NetworkError, NotFoundError, SecretMcpError, with_operation
from secret_mcp.lcd import LcdClient
from secret_mcp.models import (
    BlockInfo,
    CodeInfo,
    ContractInfo,
    NetworkConfig,
    NetworkStatus,
    TokenBalance,
    TransactionInfo,
)
from secret_mcp.retry import retry_async

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_lcd_client(network: NetworkConfig, *, timeout: float = 10.0) -> LcdClient:
    """LCD URL when configured, otherwise the RPC URL; backups become failover nodes."""
    if network.lcd_url:
        primary, backup = network.lcd_url, network.lcd_url_backup
    else:
        primary, backup = network.rpc_url, network.rpc_url_backup
    return LcdClient(primary, backup_urls=[backup] if backup else [], timeout=timeout)


class SecretNetworkChain(
    ChainClient,
    SupportsHealthCheck,
    SupportsNetworkConfig,
    Snip20Capable,
    CodeInfoCapable,
):
    """Chain adapter bound to one ``NetworkConfig``."""

    def __init__(
        self,
        network: NetworkConfig,
        *,
        client: Optional[LcdClient] = None,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self.network = network
        self.client = client or build_lcd_client(network, timeout=timeout)
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay
        logger.info(
            "Secret Network client initialized chain_id=%s network=%s url=%s",
            network.chain_id,
            network.name,
            self.client.base_url,
        )

    async def _run(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await retry_async(
                fn,
                self._retry_attempts,
                self._retry_delay,
                retry_on=(NetworkError,),
            )
        except SecretMcpError as exc:
            logger.error("%s failed: %s", operation, exc)
            raise with_operation(exc, operation) from exc
        except Exception as exc:
            logger.exception("%s failed unexpectedly", operation)
            raise SecretMcpError(f"{operation} failed: {exc}", operation=operation) from exc

    async def get_network_status(self) -> NetworkStatus:
        async def _fetch() -> NetworkStatus:
            latest, pool, inflation = await asyncio.gather(
                self.client.fetch_latest_block(),
                self.client.fetch_staking_pool(),
                self._fetch_inflation(),
            )
            header = (latest.get("block") or {}).get("header") or {}
            height = header.get("height") or "0"
            validator_set = await self.client.fetch_validator_set(height)
            return NetworkStatus(
                chain_id=self.network.chain_id,
                latest_block_height=to_int(height),
                latest_block_time=normalize_timestamp(header.get("time")),
                validator_count=len(validator_set.get("validators") or []),
                bonded_tokens=to_amount((pool.get("pool") or {}).get("bonded_tokens")),
                inflation=inflation,
            )

        return await self._run("get_network_status", _fetch)

    async def _fetch_inflation(self) -> Optional[float]:
        try:
            data = await self.client.fetch_inflation()
        except SecretMcpError as exc:
            logger.debug("Inflation unavailable: %s", exc)
            return None
        return to_float(data.get("inflation"))

    async def get_block_info(self, height: int) -> BlockInfo:
        async def _fetch() -> BlockInfo:
            data = await self.client.fetch_block_by_height(height)
            block = data.get("block")
            if not block:
                raise NotFoundError(f"Block not found at height {height}")
            header = block.get("header") or {}
            txs = (block.get("data") or {}).get("txs") or []
            return BlockInfo(
                height=to_int(header.get("height")),
                hash=normalize_bytes((data.get("block_id") or {}).get("hash")),
                time=normalize_timestamp(header.get("time")),
                proposer=normalize_bytes(header.get("proposer_address")),
                tx_count=len(txs),
            )

        return await self._run("get_block_info", _fetch)

    async def get_transaction_info(self, tx_hash: str) -> TransactionInfo:
        async def _fetch() -> TransactionInfo:
            data = await self.client.fetch_tx(tx_hash)
            response = data.get("tx_response")
            if not response:
                raise NotFoundError(f"Transaction not found: {tx_hash}")
            tx = response.get("tx") or data.get("tx") or {}
            fee_coins = ((tx.get("auth_info") or {}).get("fee") or {}).get("amount") or []
            return TransactionInfo(
                hash=response.get("txhash") or tx_hash,
                height=to_int(response.get("height")),
                index=0,
                code=to_int(response.get("code")),
                gas_used=to_amount(response.get("gas_used")),
                gas_wanted=to_amount(response.get("gas_wanted")),
                fee=to_amount(fee_coins[0].get("amount") if fee_coins else None),
                timestamp=normalize_timestamp(response.get("timestamp")),
                memo=(tx.get("body") or {}).get("memo") or "",
            )

        return await self._run("get_transaction_info", _fetch)

    async def get_token_balance(self, address: str, denom: Optional[str] = None) -> List[TokenBalance]:
        async def _fetch() -> List[TokenBalance]:
            data = await self.client.fetch_all_balances(address)
            balances: List[TokenBalance] = []
            for coin in data.get("balances") or []:
                coin_denom = coin.get("denom") or ""
                if denom and coin_denom != denom:
                    continue
                native = coin_denom == self.network.native_denom
                balances.append(
                    TokenBalance(
                        address=address,
                        amount=to_amount(coin.get("amount")),
                        denom=coin_denom,
                        symbol=self.network.native_symbol if native else coin_denom,
                        decimals=self.network.native_decimals if native else None,
                    )
                )
            return balances

        return await self._run("get_token_balance", _fetch)

    async def query_contract(self, contract_address: str, query: Dict[str, Any]) -> Any:
        return await self._run(
            "query_contract", lambda: self.client.query_contract(contract_address, query)
        )

    async def get_contract_info(self, contract_address: str) -> ContractInfo:
        async def _fetch() -> ContractInfo:
            data = await self.client.fetch_contract_info(contract_address)
            info = data.get("contract_info")
            if not info:
                raise NotFoundError(f"Contract not found: {contract_address}")
            return ContractInfo(
                address=contract_address,
                code_id=to_int(info.get("code_id")),
                creator=normalize_bytes(info.get("creator")),
                label=info.get("label") or "",
                admin=info.get("admin") or None,
                ibc_port_id=info.get("ibc_port_id") or None,
            )

        return await self._run("get_contract_info", _fetch)

    async def get_code_info(self, code_id: int) -> CodeInfo:
        async def _fetch() -> CodeInfo:
            data = await self.client.fetch_code_info(code_id)
            info = data.get("code_info")
            if not info:
                raise NotFoundError(f"Code not found: {code_id}")
            return CodeInfo(
                code_id=to_int(info.get("code_id"), default=code_id),
                creator=normalize_bytes(info.get("creator")),
                code_hash=normalize_bytes(info.get("code_hash")),
                source=info.get("source") or None,
                builder=info.get("builder") or None,
            )

        return await self._run("get_code_info", _fetch)

    async def get_snip20_token_info(self, contract_address: str) -> Any:
        try:
            return await self.query_contract(contract_address, {"token_info": {}})
        except SecretMcpError as exc:
            raise with_operation(exc, "get_snip20_token_info") from exc

    async def get_snip20_balance(self, contract_address: str, address: str, viewing_key: str) -> Any:
        try:
            return await self.query_contract(
                contract_address, {"balance": {"address": address, "key": viewing_key}}
            )
        except SecretMcpError as exc:
            raise with_operation(exc, "get_snip20_balance") from exc

    async def is_healthy(self) -> bool:
        try:
            await self.client.fetch_latest_block()
        except Exception as exc:
            logger.warning("Health check failed for %s: %s", self.network.chain_id, exc)
            return False
        return True

    def get_network_config(self) -> NetworkConfig:
        return self.network

    async def aclose(self) -> None:
        await self.client.aclose()
