"""Chain stubs shared by the registry, tool and server tests."""

from secret_mcp.chain import (
    ChainClient,
    ChainRegistry,
    CodeInfoCapable,
    Snip20Capable,
    SupportsHealthCheck,
    SupportsNetworkConfig,
)
from secret_mcp.config import load_network_configs
from secret_mcp.errors import NotFoundError
from secret_mcp.models import (
    BlockInfo,
    CodeInfo,
    ContractInfo,
    NetworkStatus,
    TokenBalance,
    TransactionInfo,
)

ADDRESS = "secret1" + "q" * 38
CONTRACT = "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek"
TX_HASH = "AB" * 32


class StubChain(ChainClient):
    """Minimal chain: only the required query contract."""

    def __init__(self, height=100, validators=10, chain_id="secret-4", error=None):
        self.height = height
        self.validators = validators
        self.chain_id = chain_id
        self.error = error
        self.calls = []
        self.closed = False

    def _check(self, name, *args):
        self.calls.append((name, *args))
        if self.error is not None:
            raise self.error

    async def get_network_status(self):
        self._check("get_network_status")
        return NetworkStatus(
            chain_id=self.chain_id,
            latest_block_height=self.height,
            latest_block_time="2024-01-01T00:00:00.000Z",
            validator_count=self.validators,
            bonded_tokens="1000",
            inflation=0.1,
        )

    async def get_block_info(self, height):
        self._check("get_block_info", height)
        if height > self.height:
            raise NotFoundError(f"Block not found at height {height}")
        return BlockInfo(height=height, hash=f"hash{height}", time="2024-01-01T00:00:00.000Z", proposer="ab", tx_count=1)

    async def get_transaction_info(self, tx_hash):
        self._check("get_transaction_info", tx_hash)
        return TransactionInfo(
            hash=tx_hash,
            height=5,
            index=0,
            code=0,
            gas_used="1",
            gas_wanted="2",
            fee="3",
            timestamp="2024-01-01T00:00:00.000Z",
            memo="",
        )

    async def get_token_balance(self, address, denom=None):
        self._check("get_token_balance", address, denom)
        return [TokenBalance(address=address, amount="1500000", denom="uscrt", symbol="SCRT", decimals=6)]

    async def query_contract(self, contract_address, query):
        self._check("query_contract", contract_address, query)
        return {"echo": query}

    async def get_contract_info(self, contract_address):
        self._check("get_contract_info", contract_address)
        return ContractInfo(address=contract_address, code_id=1, creator=ADDRESS, label="token")

    async def aclose(self):
        self.closed = True


class FullStubChain(StubChain, SupportsHealthCheck, SupportsNetworkConfig, Snip20Capable, CodeInfoCapable):
    """Stub exposing every optional capability."""

    def __init__(self, *args, healthy=True, network=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.healthy = healthy
        self.network = network or load_network_configs()["mainnet"]

    async def is_healthy(self):
        if isinstance(self.healthy, Exception):
            raise self.healthy
        return self.healthy

    def get_network_config(self):
        return self.network

    async def get_snip20_token_info(self, contract_address):
        self._check("get_snip20_token_info", contract_address)
        return {"token_info": {"name": "Secret SCRT", "symbol": "SSCRT", "decimals": 6}}

    async def get_snip20_balance(self, contract_address, address, viewing_key):
        self._check("get_snip20_balance", contract_address, address, viewing_key)
        return {"balance": {"amount": "42"}}

    async def get_code_info(self, code_id):
        self._check("get_code_info", code_id)
        return CodeInfo(code_id=code_id, creator=ADDRESS, code_hash="beef")


def registry_with(chain, **kwargs):
    """Registry whose active slot already holds ``chain``."""
    registry = ChainRegistry(**kwargs)
    registry.add_chain("secret", chain)
    return registry
