"""
Configuration helpers for the Secret Network MCP server.

This module centralizes network tier selection, endpoint overrides, offline and
startup flags, timeouts and logging settings. Environment variables are read
once into ``ServerConfig``; the registry and server receive explicit values
rather than looking the environment up themselves.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from secret_mcp.errors import ConfigurationError
from secret_mcp.models import NetworkConfig

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_NETWORKS_FILE = DATA_DIR / "networks.json"
DEFAULT_CONTRACTS_FILE = DATA_DIR / "contracts.json"

MAINNET_CHAIN_ID = "secret-4"
TESTNET_CHAIN_ID = "pulsar-3"
NETWORK_TIERS = ("mainnet", "testnet")

# Used when networks.json cannot be found.
FALLBACK_NETWORKS: Dict[str, Dict[str, Any]] = {
    "mainnet": {
        "chainId": MAINNET_CHAIN_ID,
        "name": "Secret Network Mainnet",
        "rpcUrl": "https://secretnetwork-rpc.lavenderfive.com:443",
        "grpcUrl": "https://secretnetwork-grpc.lavenderfive.com:443",
        "nativeDenom": "uscrt",
        "coinGeckoId": "secret",
        "explorer": "https://secretnodes.com",
    },
    "testnet": {
        "chainId": TESTNET_CHAIN_ID,
        "name": "Secret Network Testnet",
        "rpcUrl": "https://lcd.testnet.secretsaturn.net",
        "grpcUrl": "https://grpc.testnet.secretsaturn.net:443",
        "nativeDenom": "uscrt",
        "coinGeckoId": None,
        "explorer": "https://secretnodes.com/pulsar",
    },
}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw:
        try:
            return float(raw)
        except ValueError:
            return default
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw:
        try:
            return int(raw)
        except ValueError:
            return default
    return default


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip() or None


@dataclass(frozen=True, slots=True)
class EndpointOverrides:
    """Endpoint URL substitutions applied once when a chain is initialized."""

    rpc_url: Optional[str] = None
    lcd_url: Optional[str] = None
    grpc_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EndpointOverrides":
        return cls(
            rpc_url=_env_str("SECRET_RPC_URL"),
            lcd_url=_env_str("SECRET_LCD_URL"),
            grpc_url=_env_str("SECRET_GRPC_URL"),
        )

    def apply(self, network: NetworkConfig) -> NetworkConfig:
        changes = {
            key: value
            for key, value in (
                ("rpc_url", self.rpc_url),
                ("lcd_url", self.lcd_url),
                ("grpc_url", self.grpc_url),
            )
            if value
        }
        if not changes:
            return network
        return replace(network, **changes)


@dataclass(slots=True)
class ServerConfig:
    """Runtime configuration for the MCP server."""

    network: str = field(default_factory=lambda: os.getenv("NETWORK", "mainnet"))
    overrides: EndpointOverrides = field(default_factory=EndpointOverrides.from_env)
    allow_offline_mode: bool = field(default_factory=lambda: _env_flag("ALLOW_OFFLINE_MODE"))
    skip_network_check: bool = field(default_factory=lambda: _env_flag("SKIP_NETWORK_CHECK"))
    timeout: float = field(default_factory=lambda: _env_float("SECRET_HTTP_TIMEOUT", 10.0))
    retry_attempts: int = field(default_factory=lambda: _env_int("SECRET_RETRY_ATTEMPTS", 3))
    retry_delay: float = field(default_factory=lambda: _env_float("SECRET_RETRY_DELAY", 1.0))
    networks_file: Path = field(
        default_factory=lambda: Path(os.getenv("SECRET_NETWORKS_FILE", str(DEFAULT_NETWORKS_FILE)))
    )
    contracts_file: Path = field(
        default_factory=lambda: Path(os.getenv("SECRET_CONTRACTS_FILE", str(DEFAULT_CONTRACTS_FILE)))
    )
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))  # json or plain
    # Declared for deployment parity; nothing enforces them.
    rate_limit_requests: int = field(default_factory=lambda: _env_int("RATE_LIMIT_REQUESTS", 100))
    rate_limit_window_ms: int = field(default_factory=lambda: _env_int("RATE_LIMIT_WINDOW", 60000))


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc


def load_network_configs(path: Optional[Path] = None) -> Dict[str, NetworkConfig]:
    """
    Load every network tier from ``networks.json``.

    A missing file falls back to the built-in mainnet/testnet endpoints with a
    warning; malformed content raises ``ConfigurationError``.
    """
    source = Path(path) if path is not None else DEFAULT_NETWORKS_FILE
    if source.is_file():
        raw = _read_json(source)
    else:
        logger.warning("Network configuration %s not found, using built-in defaults", source)
        raw = FALLBACK_NETWORKS
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Network configuration in {source} must be an object")

    networks: Dict[str, NetworkConfig] = {}
    for tier, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Network entry '{tier}' must be an object")
        try:
            networks[tier] = NetworkConfig.from_dict(entry)
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Network entry '{tier}' is missing field {exc}") from exc
    return networks


def get_network_config(networks: Dict[str, NetworkConfig], tier: str) -> NetworkConfig:
    network = networks.get(tier)
    if network is None:
        raise ConfigurationError(f"Configuration not found for network: {tier}")
    return network


def load_known_contracts(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load the known-contracts table keyed by tier, then category."""
    source = Path(path) if path is not None else DEFAULT_CONTRACTS_FILE
    if not source.is_file():
        raise ConfigurationError(f"Contract configuration {source} not found")
    raw = _read_json(source)
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Contract configuration in {source} must be an object")
    return raw


def network_tier_for_chain_id(chain_id: str) -> str:
    return "mainnet" if chain_id == MAINNET_CHAIN_ID else "testnet"


default_config = ServerConfig()
