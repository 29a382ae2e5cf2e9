"""
Thin HTTP client for the Cosmos / Secret Network LCD REST endpoints.

All methods are read-only. Transport failures and LCD error payloads are mapped
to the shared error taxonomy so the adapter layer can retry and report them.
Base64 byte fields that the adapter needs (block hash, proposer address, code
hash) are decoded to ``bytes`` here.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from secret_mcp.errors import (
    ContractError,
    NetworkError,
    NotFoundError,
    SecretMcpError,
)

logger = logging.getLogger(__name__)

# gRPC status codes surfaced by the LCD gateway.
GRPC_INVALID_ARGUMENT = 3
GRPC_NOT_FOUND = 5
GRPC_UNAVAILABLE = 14

COMPUTE_QUERY_PREFIX = "/compute/v1beta1/query/"


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


def decode_base64_bytes(value: Any) -> Any:
    """Decode a base64 string to bytes; anything else is returned unchanged."""
    if not isinstance(value, str) or not value:
        return value
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return value


@dataclass(slots=True)
class _NodeEntry:
    base_url: str
    client: Optional[httpx.AsyncClient] = None
    last_failure: Optional[float] = None


class NodePool:
    """Primary-first failover across an endpoint and its backups."""

    def __init__(
        self,
        nodes: List[str],
        timeout: float,
        *,
        cooldown_seconds: float = 30.0,
    ) -> None:
        self._entries: List[_NodeEntry] = [_NodeEntry(base_url=node) for node in nodes]
        self._timeout = timeout
        self._cooldown_seconds = cooldown_seconds

    @property
    def urls(self) -> List[str]:
        return [entry.base_url for entry in self._entries]

    def _in_cooldown(self, entry: _NodeEntry) -> bool:
        if entry.last_failure is None:
            return False
        return (time.monotonic() - entry.last_failure) < self._cooldown_seconds

    def _ensure_client(self, entry: _NodeEntry) -> httpx.AsyncClient:
        if entry.client is None:
            entry.client = httpx.AsyncClient(base_url=entry.base_url, timeout=self._timeout)
        return entry.client

    def get_candidates(self) -> List[Tuple[httpx.AsyncClient, _NodeEntry]]:
        """Return clients to try in priority order, skipping nodes in cooldown."""
        candidates = [
            (self._ensure_client(entry), entry)
            for entry in self._entries
            if not self._in_cooldown(entry)
        ]
        if not candidates and self._entries:
            primary = self._entries[0]
            candidates.append((self._ensure_client(primary), primary))
        return candidates

    def report_failure(self, base_url: str) -> None:
        for entry in self._entries:
            if entry.base_url == base_url:
                entry.last_failure = time.monotonic()
                break

    def report_success(self, base_url: str) -> None:
        for entry in self._entries:
            if entry.base_url == base_url:
                entry.last_failure = None
                break

    async def aclose(self) -> None:
        for entry in self._entries:
            if entry.client is not None:
                await entry.client.aclose()
                entry.client = None


class LcdClient:
    """Async client for the read-only LCD surface used by the chain adapter."""

    def __init__(
        self,
        base_url: str,
        *,
        backup_urls: Optional[List[str]] = None,
        timeout: float = 10.0,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = _normalize_url(base_url)
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._node_pool = self._build_node_pool(backup_urls or [])

    def _build_node_pool(self, backup_urls: List[str]) -> Optional[NodePool]:
        if self._client is not None:
            return None
        ordered: List[str] = []
        for url in [self.base_url, *map(_normalize_url, backup_urls)]:
            if url and url not in ordered:
                ordered.append(url)
        if len(ordered) <= 1:
            return None
        return NodePool(ordered, timeout=self.timeout)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._node_pool is not None:
            await self._node_pool.aclose()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _map_error(self, path: str, status_code: int, data: Any) -> SecretMcpError:
        code: Optional[int] = None
        message = ""
        if isinstance(data, dict):
            raw_code = data.get("code")
            if isinstance(raw_code, int):
                code = raw_code
            raw_message = data.get("message") or data.get("error")
            if isinstance(raw_message, str):
                message = raw_message
        lowered = message.lower()

        if path.startswith(COMPUTE_QUERY_PREFIX) and status_code < 500:
            return ContractError(
                f"Contract query failed: {message}" if message else "Contract query failed.",
                status_code=status_code,
            )
        if code == GRPC_NOT_FOUND or status_code == 404 or "not found" in lowered:
            return NotFoundError(message or "Resource not found.", status_code=status_code)
        if "height" in lowered and ("bigger" in lowered or "greater" in lowered):
            return NotFoundError(message, status_code=status_code)
        if code == GRPC_UNAVAILABLE or status_code >= 500:
            return NetworkError(
                f"LCD endpoint error ({status_code}): {message}" if message else f"LCD endpoint error ({status_code})",
                status_code=status_code,
            )
        if code == GRPC_INVALID_ARGUMENT:
            return SecretMcpError(message or "Invalid request.", status_code=status_code)
        return SecretMcpError(message or "LCD API error.", status_code=status_code)

    def _process_response(self, path: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            raise self._map_error(path, response.status_code, data)

        if not isinstance(data, dict):
            raise NetworkError("Unexpected response from LCD endpoint.", status_code=response.status_code)
        return data

    async def _request(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._node_pool is None:
            client = await self._get_client()
            try:
                response = await client.get(path, params=params)
            except httpx.HTTPError as exc:
                logger.warning("LCD endpoint unreachable for path %s", path)
                raise NetworkError(f"LCD endpoint unreachable: {exc}") from exc
            return self._process_response(path, response)

        last_exc: Optional[Exception] = None
        for client, entry in self._node_pool.get_candidates():
            try:
                response = await client.get(path, params=params)
            except httpx.HTTPError as exc:
                logger.warning("LCD endpoint unreachable for path %s via %s", path, entry.base_url)
                self._node_pool.report_failure(entry.base_url)
                last_exc = exc
                continue
            if response.status_code >= 500:
                logger.warning(
                    "LCD endpoint %s returned %s for path %s", entry.base_url, response.status_code, path
                )
                self._node_pool.report_failure(entry.base_url)
                last_exc = self._map_error(path, response.status_code, None)
                continue
            self._node_pool.report_success(entry.base_url)
            return self._process_response(path, response)

        raise NetworkError(f"LCD endpoint unreachable: {last_exc}") from last_exc

    async def fetch_latest_block(self) -> Dict[str, Any]:
        """Latest block with ``block_id.hash`` and ``header.proposer_address`` decoded."""
        data = await self._request("/cosmos/base/tendermint/v1beta1/blocks/latest")
        return self._decode_block(data)

    async def fetch_block_by_height(self, height: int) -> Dict[str, Any]:
        data = await self._request(f"/cosmos/base/tendermint/v1beta1/blocks/{int(height)}")
        return self._decode_block(data)

    @staticmethod
    def _decode_block(data: Dict[str, Any]) -> Dict[str, Any]:
        block_id = data.get("block_id")
        if isinstance(block_id, dict) and "hash" in block_id:
            block_id["hash"] = decode_base64_bytes(block_id["hash"])
        block = data.get("block")
        header = block.get("header") if isinstance(block, dict) else None
        if isinstance(header, dict) and "proposer_address" in header:
            header["proposer_address"] = decode_base64_bytes(header["proposer_address"])
        return data

    async def fetch_validator_set(self, height: int | str) -> Dict[str, Any]:
        return await self._request(
            f"/cosmos/base/tendermint/v1beta1/validatorsets/{quote(str(height), safe='')}",
            params={"pagination.limit": 500},
        )

    async def fetch_staking_pool(self) -> Dict[str, Any]:
        return await self._request("/cosmos/staking/v1beta1/pool")

    async def fetch_inflation(self) -> Dict[str, Any]:
        return await self._request("/cosmos/mint/v1beta1/inflation")

    async def fetch_tx(self, tx_hash: str) -> Dict[str, Any]:
        return await self._request(f"/cosmos/tx/v1beta1/txs/{quote(tx_hash.upper(), safe='')}")

    async def fetch_all_balances(self, address: str) -> Dict[str, Any]:
        return await self._request(f"/cosmos/bank/v1beta1/balances/{quote(address, safe='')}")

    async def fetch_contract_info(self, contract_address: str) -> Dict[str, Any]:
        return await self._request(f"/compute/v1beta1/info/{quote(contract_address, safe='')}")

    async def fetch_code_info(self, code_id: int) -> Dict[str, Any]:
        data = await self._request(f"/compute/v1beta1/code/{int(code_id)}")
        code_info = data.get("code_info")
        if isinstance(code_info, dict) and "code_hash" in code_info:
            code_info["code_hash"] = decode_base64_bytes(code_info["code_hash"])
        return data

    async def query_contract(self, contract_address: str, query: Dict[str, Any]) -> Any:
        """Run a smart query; the JSON query and result travel base64-encoded."""
        encoded = base64.b64encode(json.dumps(query, separators=(",", ":")).encode("utf-8")).decode("ascii")
        data = await self._request(
            f"{COMPUTE_QUERY_PREFIX}{quote(contract_address, safe='')}",
            params={"query": encoded},
        )
        raw = data.get("data")
        if not isinstance(raw, str):
            return raw
        try:
            return json.loads(base64.b64decode(raw))
        except (binascii.Error, ValueError) as exc:
            raise ContractError("Contract returned an undecodable result.") from exc
