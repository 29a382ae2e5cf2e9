"""
Chain registry: owns adapter instances and the connect / fallback lifecycle.

The registry is constructed by the service and passed to every tool handler.
Per chain slot the state moves ``UNINITIALIZED -> CONNECTING`` on
``initialize`` and then to ``CONNECTED``, ``FAILED`` or ``OFFLINE_MOCK``.
``CONNECTED`` is terminal for the run; a fresh ``initialize`` call is the only
way to retry, and it closes the adapter it replaces.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, List, Optional, Union

from secret_mcp.chain.base import ChainClient, SupportsHealthCheck, SupportsNetworkConfig
from secret_mcp.chain.offline import OfflineChain
from secret_mcp.chain.secret import SecretNetworkChain
from secret_mcp.config import (
    EndpointOverrides,
    ServerConfig,
    get_network_config,
    load_network_configs,
)
from secret_mcp.errors import ChainInitializationError, ChainNotAvailableError
from secret_mcp.models import NetworkConfig, NetworkStatus

logger = logging.getLogger(__name__)

DEFAULT_CHAIN = "secret"

ChainFactory = Callable[[NetworkConfig], ChainClient]


class ChainState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    OFFLINE_MOCK = "offline_mock"


def _default_factory(settings: ServerConfig) -> ChainFactory:
    def build(network: NetworkConfig) -> ChainClient:
        return SecretNetworkChain(
            network,
            timeout=settings.timeout,
            retry_attempts=settings.retry_attempts,
            retry_delay=settings.retry_delay,
        )

    return build


class ChainRegistry:
    """Registry of chain adapters keyed by chain name, one of them active."""

    def __init__(
        self,
        *,
        networks: Optional[Dict[str, NetworkConfig]] = None,
        chain_factory: Optional[ChainFactory] = None,
        allow_offline: bool = False,
        settings: Optional[ServerConfig] = None,
        active_chain: str = DEFAULT_CHAIN,
    ) -> None:
        self.settings = settings or ServerConfig()
        self._networks = networks
        self._chain_factory = chain_factory or _default_factory(self.settings)
        self.allow_offline = allow_offline
        self._chains: Dict[str, ChainClient] = {}
        self._states: Dict[str, ChainState] = {}
        self._active = active_chain
        self._network_tier = "mainnet"
        logger.info("Chain registry created")

    @property
    def active_chain_name(self) -> str:
        return self._active

    def state(self, chain_name: Optional[str] = None) -> ChainState:
        return self._states.get(chain_name or self._active, ChainState.UNINITIALIZED)

    def _networks_table(self) -> Dict[str, NetworkConfig]:
        if self._networks is None:
            self._networks = load_network_configs(self.settings.networks_file)
        return self._networks

    async def initialize(
        self,
        network: str = "mainnet",
        *,
        overrides: Optional[EndpointOverrides] = None,
        allow_offline: Optional[bool] = None,
    ) -> ChainClient:
        """
        Connect the active chain slot to ``network`` and probe it.

        Raises:
            ChainInitializationError: the probe failed and offline mode is not
                allowed. Nothing is registered in that case.
        """
        offline_ok = self.allow_offline if allow_offline is None else allow_offline
        name = self._active
        self._network_tier = network
        self._states[name] = ChainState.CONNECTING
        chain: Optional[ChainClient] = None
        try:
            config = get_network_config(self._networks_table(), network)
            if overrides is not None:
                config = overrides.apply(config)
            logger.info(
                "Attempting to connect network=%s chain_id=%s rpc=%s lcd=%s",
                network,
                config.chain_id,
                config.rpc_url,
                config.lcd_url,
            )
            chain = self._chain_factory(config)
            status = await chain.get_network_status()
            # Zero height or zero validators means a broken or stub backend.
            if status.latest_block_height == 0 or status.validator_count == 0:
                raise ChainInitializationError(
                    "Received invalid network status - possible RPC connection failure"
                )
        except Exception as exc:
            logger.error("Failed to initialize chain %s: %s", name, exc)
            if chain is not None:
                await self._close_quietly(chain)
            await self._release(name, keep=chain)
            if offline_ok:
                logger.warning("Falling back to offline mode as explicitly requested")
                return self._install_offline(name, network)
            self._states[name] = ChainState.FAILED
            raise ChainInitializationError(
                f"Chain initialization failed: {exc}. "
                "Set ALLOW_OFFLINE_MODE=true to continue with mock data."
            ) from exc

        logger.info(
            "Connected to %s height=%s validators=%s",
            status.chain_id,
            status.latest_block_height,
            status.validator_count,
        )
        await self._release(name, keep=chain)
        self._chains[name] = chain
        self._states[name] = ChainState.CONNECTED
        return chain

    async def _release(self, name: str, *, keep: Optional[ChainClient] = None) -> None:
        """Unregister the adapter in slot ``name`` and close it unless it is ``keep``."""
        previous = self._chains.pop(name, None)
        if previous is not None and previous is not keep:
            await self._close_quietly(previous)

    def _install_offline(self, name: str, network: str) -> ChainClient:
        logger.info("Initializing offline mode for %s", name)
        mock = OfflineChain(network)
        self._chains[name] = mock
        self._states[name] = ChainState.OFFLINE_MOCK
        return mock

    def get_active_chain(self) -> ChainClient:
        chain = self._chains.get(self._active)
        if chain is not None:
            return chain
        if self.allow_offline:
            logger.warning("No active chain available, creating offline mock (explicitly allowed)")
            return self._install_offline(self._active, self._network_tier)
        raise ChainNotAvailableError(
            f"Active chain '{self._active}' not initialized. Real network connection required."
        )

    def set_active_chain(self, chain_name: str) -> None:
        if chain_name not in self._chains:
            raise ChainNotAvailableError(f"Chain '{chain_name}' not available")
        self._active = chain_name
        logger.info("Active chain changed to %s", chain_name)

    def get_available_chains(self) -> List[str]:
        return list(self._chains.keys())

    def get_chain(self, chain_name: str) -> ChainClient:
        chain = self._chains.get(chain_name)
        if chain is None:
            raise ChainNotAvailableError(f"Chain '{chain_name}' not available")
        return chain

    def add_chain(self, chain_name: str, chain: ChainClient) -> None:
        self._chains[chain_name] = chain
        self._states[chain_name] = ChainState.CONNECTED
        logger.info("Chain added: %s", chain_name)

    async def health_check(self) -> Dict[str, bool]:
        """Probe every registered chain; one chain's failure never affects another."""
        results: Dict[str, bool] = {}
        for name, chain in self._chains.items():
            try:
                if isinstance(chain, SupportsHealthCheck):
                    results[name] = bool(await chain.is_healthy())
                else:
                    await chain.get_network_status()
                    results[name] = True
            except Exception as exc:
                logger.warning("Health check failed for %s: %s", name, exc)
                results[name] = False
        return results

    async def get_active_network_info(self) -> Union[NetworkConfig, NetworkStatus]:
        chain = self.get_active_chain()
        if isinstance(chain, SupportsNetworkConfig):
            return chain.get_network_config()
        return await chain.get_network_status()

    async def shutdown(self) -> None:
        for chain in list(self._chains.values()):
            await self._close_quietly(chain)
        self._chains.clear()
        self._states.clear()
        logger.info("Chain registry shut down")

    @staticmethod
    async def _close_quietly(chain: ChainClient) -> None:
        try:
            await chain.aclose()
        except Exception:
            logger.exception("Error closing chain client")
