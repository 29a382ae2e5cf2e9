"""
Error taxonomy shared by the wire client, chain adapters, registry and tools.

Tool handlers catch every ``SecretMcpError`` at their boundary and render the
message into a failure envelope. ``ChainInitializationError`` is the only error
allowed to stop the server from starting.
"""

from __future__ import annotations

from typing import Optional


class SecretMcpError(Exception):
    """Base exception for Secret Network MCP errors."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class ValidationError(SecretMcpError):
    """Raised when caller input has the wrong shape or is out of bounds."""


class NotFoundError(SecretMcpError):
    """Raised when a block, transaction, contract or code id does not exist."""


class NetworkError(SecretMcpError):
    """Raised when the endpoint cannot be reached or fails server-side."""


class ContractError(SecretMcpError):
    """Raised when a contract rejects a query."""


class ConfigurationError(SecretMcpError):
    """Raised when network or contract reference data is missing or invalid."""


class UnsupportedCapabilityError(SecretMcpError):
    """Raised when the active chain lacks an optional capability."""


class ChainNotAvailableError(SecretMcpError):
    """Raised when a chain is requested that is not registered."""


class ChainInitializationError(SecretMcpError):
    """Raised when the chain cannot be connected and offline mode is not allowed."""


def with_operation(error: SecretMcpError, operation: str) -> SecretMcpError:
    """Return a copy of ``error`` (same kind and message) tagged with ``operation``."""
    return type(error)(str(error), operation=operation, status_code=error.status_code)
