import pytest

from secret_mcp.chain import ChainRegistry, ChainState, OfflineChain
from secret_mcp.config import EndpointOverrides, load_network_configs
from secret_mcp.errors import ChainInitializationError, ChainNotAvailableError, NetworkError

from helpers import FullStubChain, StubChain, registry_with

NETWORKS = load_network_configs()


def factory_for(chain, seen=None):
    def build(network):
        if seen is not None:
            seen.append(network)
        return chain

    return build


@pytest.mark.asyncio
async def test_initialize_connects_real_chain():
    chain = FullStubChain()
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain))
    assert registry.state() is ChainState.UNINITIALIZED

    result = await registry.initialize("mainnet")
    assert result is chain
    assert registry.state() is ChainState.CONNECTED
    assert registry.get_active_chain() is chain
    assert registry.get_available_chains() == ["secret"]


@pytest.mark.asyncio
async def test_initialize_applies_endpoint_overrides():
    seen = []
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(FullStubChain(), seen))
    await registry.initialize("testnet", overrides=EndpointOverrides(lcd_url="http://localhost:1317"))
    assert seen[0].chain_id == "pulsar-3"
    assert seen[0].lcd_url == "http://localhost:1317"


@pytest.mark.asyncio
async def test_initialize_fail_fast_leaves_nothing_registered():
    chain = StubChain(error=NetworkError("connection refused"))
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain))

    with pytest.raises(ChainInitializationError) as excinfo:
        await registry.initialize("mainnet")
    assert "connection refused" in str(excinfo.value)
    assert "ALLOW_OFFLINE_MODE=true" in str(excinfo.value)
    assert registry.state() is ChainState.FAILED
    assert registry.get_available_chains() == []
    assert chain.closed
    with pytest.raises(ChainNotAvailableError):
        registry.get_active_chain()


@pytest.mark.asyncio
@pytest.mark.parametrize("height,validators", [(0, 10), (100, 0)])
async def test_zero_status_counts_as_failure(height, validators):
    chain = StubChain(height=height, validators=validators)
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain))
    with pytest.raises(ChainInitializationError, match="invalid network status"):
        await registry.initialize("mainnet")


@pytest.mark.asyncio
async def test_unknown_network_fails():
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(StubChain()))
    with pytest.raises(ChainInitializationError, match="Configuration not found for network: devnet"):
        await registry.initialize("devnet")


@pytest.mark.asyncio
async def test_offline_fallback_when_allowed():
    chain = StubChain(error=NetworkError("down"))
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain), allow_offline=True)

    active = await registry.initialize("testnet")
    assert isinstance(active, OfflineChain)
    assert registry.state() is ChainState.OFFLINE_MOCK
    status = await registry.get_active_chain().get_network_status()
    assert status.chain_id == "pulsar-3"
    assert status.latest_block_height == 0
    assert status.validator_count == 0
    assert status.bonded_tokens == "0"
    assert registry.get_available_chains() == ["secret"]


@pytest.mark.asyncio
async def test_offline_flag_on_initialize_overrides_registry_default():
    chain = StubChain(error=NetworkError("down"))
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain))
    active = await registry.initialize("mainnet", allow_offline=True)
    assert isinstance(active, OfflineChain)


def test_lazy_offline_install_only_when_allowed():
    strict = ChainRegistry(networks=NETWORKS)
    with pytest.raises(ChainNotAvailableError, match="not initialized"):
        strict.get_active_chain()

    lenient = ChainRegistry(networks=NETWORKS, allow_offline=True)
    chain = lenient.get_active_chain()
    assert isinstance(chain, OfflineChain)
    assert lenient.state() is ChainState.OFFLINE_MOCK
    assert lenient.get_active_chain() is chain


@pytest.mark.asyncio
async def test_health_check_isolates_failures():
    registry = registry_with(FullStubChain())
    registry.add_chain("broken", FullStubChain(healthy=RuntimeError("boom")))
    registry.add_chain("plain", StubChain())
    registry.add_chain("plain_broken", StubChain(error=NetworkError("down")))

    health = await registry.health_check()
    assert health == {"secret": True, "broken": False, "plain": True, "plain_broken": False}


def test_set_active_chain_and_lookup():
    registry = registry_with(StubChain())
    other = StubChain(chain_id="pulsar-3")
    registry.add_chain("other", other)

    registry.set_active_chain("other")
    assert registry.active_chain_name == "other"
    assert registry.get_active_chain() is other
    assert registry.get_chain("other") is other

    with pytest.raises(ChainNotAvailableError, match="Chain 'missing' not available"):
        registry.set_active_chain("missing")
    with pytest.raises(ChainNotAvailableError):
        registry.get_chain("missing")


@pytest.mark.asyncio
async def test_active_network_info_prefers_config():
    full = FullStubChain()
    registry = registry_with(full)
    info = await registry.get_active_network_info()
    assert info is full.network

    plain = registry_with(StubChain(chain_id="pulsar-3"))
    status = await plain.get_active_network_info()
    assert status.chain_id == "pulsar-3"


@pytest.mark.asyncio
async def test_shutdown_closes_chains():
    chain = StubChain()
    registry = registry_with(chain)
    await registry.shutdown()
    assert chain.closed
    assert registry.get_available_chains() == []
    assert registry.state() is ChainState.UNINITIALIZED


def sequence_factory(chains):
    pending = list(chains)
    return lambda network: pending.pop(0)


@pytest.mark.asyncio
async def test_reinitialize_closes_replaced_chain():
    first, second = FullStubChain(), FullStubChain()
    registry = ChainRegistry(networks=NETWORKS, chain_factory=sequence_factory([first, second]))

    await registry.initialize("mainnet")
    await registry.initialize("mainnet")
    assert first.closed
    assert not second.closed
    assert registry.get_active_chain() is second


@pytest.mark.asyncio
async def test_failed_reinitialize_closes_previous_chain():
    first = FullStubChain()
    broken = StubChain(error=NetworkError("down"))
    registry = ChainRegistry(networks=NETWORKS, chain_factory=sequence_factory([first, broken]))

    await registry.initialize("mainnet")
    with pytest.raises(ChainInitializationError):
        await registry.initialize("mainnet")
    assert first.closed
    assert broken.closed
    assert registry.get_available_chains() == []


@pytest.mark.asyncio
async def test_reinitialize_with_same_chain_keeps_it_open():
    chain = FullStubChain()
    registry = ChainRegistry(networks=NETWORKS, chain_factory=factory_for(chain))
    await registry.initialize("mainnet")
    await registry.initialize("mainnet")
    assert not chain.closed
    assert registry.get_active_chain() is chain
