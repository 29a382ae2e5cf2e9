import os

import pytest
import pytest_asyncio

from secret_mcp.chain import SecretNetworkChain
from secret_mcp.config import get_network_config, load_network_configs
from secret_mcp.tools.contracts import get_contract_info
from secret_mcp.tools.network import get_latest_blocks, get_network_status

from helpers import registry_with

LIVE = os.getenv("LIVE_SECRET") in {"1", "true", "yes"}
LIVE_NETWORK = os.getenv("NETWORK", "mainnet")
SAMPLE_CONTRACT = os.getenv("SECRET_SAMPLE_CONTRACT", "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek")


pytestmark = pytest.mark.skipif(not LIVE, reason="Live Secret Network integration tests are disabled")


@pytest_asyncio.fixture
async def live_registry():
    network = get_network_config(load_network_configs(), LIVE_NETWORK)
    chain = SecretNetworkChain(network, timeout=15.0, retry_attempts=2, retry_delay=1.0)
    registry = registry_with(chain)
    yield registry
    await registry.shutdown()


@pytest.mark.asyncio
async def test_live_network_status(live_registry):
    result = await get_network_status(live_registry, {})
    assert result["success"] is True
    assert result["data"]["latestBlockHeight"] > 0
    assert result["data"]["validatorCount"] > 0


@pytest.mark.asyncio
async def test_live_latest_blocks(live_registry):
    result = await get_latest_blocks(live_registry, {"count": 2})
    assert result["success"] is True
    heights = [block["height"] for block in result["data"]["blocks"]]
    assert heights[0] - heights[1] == 1


@pytest.mark.asyncio
async def test_live_contract_info(live_registry):
    if LIVE_NETWORK != "mainnet":
        pytest.skip("Sample contract is a mainnet address")
    result = await get_contract_info(live_registry, {"contractAddress": SAMPLE_CONTRACT})
    assert result["success"] is True
    assert result["data"]["codeId"] > 0
