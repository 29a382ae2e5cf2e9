"""HTTP client wrappers for the Secret Network LCD API."""

from .client import LcdClient, NodePool, decode_base64_bytes

__all__ = [
    "LcdClient",
    "NodePool",
    "decode_base64_bytes",
]
