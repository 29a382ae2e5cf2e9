"""Value objects returned by chain adapters and rendered by the tool layer."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _WireMixin:
    """Render dataclass fields with camelCase keys."""

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class NetworkConfig(_WireMixin):
    """Endpoint set and denomination details for one network tier."""

    chain_id: str
    name: str
    rpc_url: str
    grpc_url: str
    native_denom: str
    explorer: str
    rpc_url_backup: Optional[str] = None
    lcd_url: Optional[str] = None
    lcd_url_backup: Optional[str] = None
    grpc_url_backup: Optional[str] = None
    coingecko_id: Optional[str] = None
    native_symbol: str = "SCRT"
    native_decimals: int = 6

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "NetworkConfig":
        """Build from the camelCase JSON shape used by ``networks.json``."""
        return cls(
            chain_id=raw["chainId"],
            name=raw["name"],
            rpc_url=raw["rpcUrl"],
            grpc_url=raw["grpcUrl"],
            native_denom=raw["nativeDenom"],
            explorer=raw["explorer"],
            rpc_url_backup=raw.get("rpcUrlBackup"),
            lcd_url=raw.get("lcdUrl"),
            lcd_url_backup=raw.get("lcdUrlBackup"),
            grpc_url_backup=raw.get("grpcUrlBackup"),
            coingecko_id=raw.get("coinGeckoId"),
            native_symbol=raw.get("nativeSymbol", "SCRT"),
            native_decimals=int(raw.get("nativeDecimals", 6)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _WireMixin.to_dict(self)
        data["coinGeckoId"] = data.pop("coingeckoId")
        return data


@dataclass(slots=True)
class NetworkStatus(_WireMixin):
    chain_id: str
    latest_block_height: int
    latest_block_time: str
    validator_count: int
    bonded_tokens: str
    inflation: Optional[float] = None


@dataclass(slots=True)
class BlockInfo(_WireMixin):
    height: int
    hash: str
    time: str
    proposer: str
    tx_count: int
    # Per-block gas totals would require decoding every tx; left as placeholders.
    gas_used: str = "0"
    gas_wanted: str = "0"


@dataclass(slots=True)
class TransactionInfo(_WireMixin):
    hash: str
    height: int
    index: int
    code: int
    gas_used: str
    gas_wanted: str
    fee: str
    timestamp: str
    memo: Optional[str] = None


@dataclass(slots=True)
class TokenBalance(_WireMixin):
    address: str
    amount: str
    denom: str
    symbol: Optional[str] = None
    decimals: Optional[int] = None


@dataclass(slots=True)
class ContractInfo(_WireMixin):
    address: str
    code_id: int
    creator: str
    label: str
    admin: Optional[str] = None
    ibc_port_id: Optional[str] = None


@dataclass(slots=True)
class CodeInfo(_WireMixin):
    code_id: int
    creator: str
    code_hash: str
    source: Optional[str] = None
    builder: Optional[str] = None
