"""Uniform response envelope returned by every tool handler."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from secret_mcp.chain.normalize import utc_now_iso
from secret_mcp.errors import SecretMcpError

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def format_response(success: bool, data: Any = None, error: Optional[str] = None) -> Dict[str, Any]:
    """``{success, data?, error?, timestamp}``; absent fields are omitted."""
    envelope: Dict[str, Any] = {"success": success}
    if data is not None:
        envelope["data"] = _plain(data)
    if error is not None:
        envelope["error"] = error
    envelope["timestamp"] = utc_now_iso()
    return envelope


def ok(data: Any) -> Dict[str, Any]:
    return format_response(True, data)


def fail(error: str) -> Dict[str, Any]:
    return format_response(False, error=error)


def error_response(exc: BaseException, context: str) -> Dict[str, Any]:
    """Render an exception caught at a handler boundary. Call from an ``except`` block."""
    if isinstance(exc, SecretMcpError):
        logger.warning("%s: %s", context, exc, extra={"error": type(exc).__name__})
        return fail(str(exc) or f"Error in {context}")
    logger.exception("Unexpected error in %s", context)
    return fail(str(exc) or f"Unknown error in {context}")
