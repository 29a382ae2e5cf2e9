"""Chain abstraction layer: query contract, adapters and registry."""

from .base import (
    ChainClient,
    CodeInfoCapable,
    Snip20Capable,
    SupportsHealthCheck,
    SupportsNetworkConfig,
)
from .offline import OfflineChain
from .registry import ChainRegistry, ChainState
from .secret import SecretNetworkChain

__all__ = [
    "ChainClient",
    "CodeInfoCapable",
    "Snip20Capable",
    "SupportsHealthCheck",
    "SupportsNetworkConfig",
    "OfflineChain",
    "ChainRegistry",
    "ChainState",
    "SecretNetworkChain",
]
