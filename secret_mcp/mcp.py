"""
JSON-RPC surface for MCP tooling.

Maps tool names to the category handlers, checks arguments against each tool's
declared input schema and wraps every envelope as MCP text content. Tool
failures travel in-band as ``success: false`` envelopes; JSON-RPC errors are
reserved for malformed requests.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

from secret_mcp import __version__
from secret_mcp.chain import ChainRegistry
from secret_mcp.metrics import default_metrics
from secret_mcp.tools import CATEGORIES
from secret_mcp.tools.definition import ToolDefinition
from secret_mcp.tools.envelope import fail

logger = logging.getLogger(__name__)

MCP_SERVER_NAME = "secret-network-mcp"
MCP_SERVER_VERSION = __version__
DEFAULT_PROTOCOL_VERSION = "2024-11-05"

_JSON_TYPES = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}

TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    tool.name: tool for tools, _handler in CATEGORIES.values() for tool in tools
}


def list_tools() -> List[Dict[str, Any]]:
    """Return tool declarations in MCP ``tools/list`` shape."""
    return [tool.to_dict() for tool in TOOL_REGISTRY.values()]


def _matches_type(value: Any, expected: str) -> bool:
    kinds = _JSON_TYPES.get(expected)
    if kinds is None:
        return True
    if expected in ("integer", "number") and isinstance(value, bool):
        return False
    return isinstance(value, kinds)


def validate_arguments(tool: ToolDefinition, args: Any) -> Optional[str]:
    """Check presence of required fields and primitive types; return an error message or None."""
    if not isinstance(args, dict):
        return "Arguments must be an object"
    schema = tool.input_schema
    for field_name in schema.get("required", []):
        if args.get(field_name) is None:
            return f"Missing required argument: {field_name}"
    properties = schema.get("properties", {})
    for field_name, value in args.items():
        declared = properties.get(field_name)
        if declared is None or value is None:
            continue
        expected = declared.get("type")
        if expected and not _matches_type(value, expected):
            return f"Argument '{field_name}' must be of type {expected}"
    return None


async def call_tool(name: str, args: Optional[Dict[str, Any]], registry: ChainRegistry) -> Dict[str, Any]:
    """Dispatch to a tool by name; always returns an envelope."""
    tool = TOOL_REGISTRY.get(name)
    if tool is None:
        return fail(f"Unknown tool: {name}")
    arguments = {} if args is None else args
    problem = validate_arguments(tool, arguments)
    if problem:
        return fail(problem)
    _tools, handler = CATEGORIES[tool.category]
    try:
        return await handler(name, arguments, registry)
    except Exception as exc:
        logger.exception("Tool execution failed: %s", name)
        return fail(str(exc) or "Unexpected error while calling tool.")


def wrap_tool_result(envelope: Dict[str, Any]) -> Dict[str, Any]:
    """Shape an envelope into the MCP content array."""
    return {"content": [{"type": "text", "text": json.dumps(envelope, indent=2, default=str)}]}


def log_tool_result(
    tool_name: str,
    result: Any,
    request_id: Optional[str] = None,
    *,
    duration_ms: Optional[float] = None,
) -> None:
    if isinstance(result, dict) and result.get("success") is False:
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False, duration_ms=duration_ms)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True, duration_ms=duration_ms)


def jsonrpc_success(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def jsonrpc_error(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


async def handle_jsonrpc(
    body: Any,
    registry: ChainRegistry,
    *,
    request_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message.

    Supported methods:
      - initialize
      - ping
      - tools/list (alias list_tools)
      - tools/call (alias call_tool)
      - notifications/initialized (no response)

    Returns None for notifications.
    """
    if not isinstance(body, dict):
        return jsonrpc_error(None, -32600, "Invalid request")

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return jsonrpc_error(rpc_id, -32602, "Invalid params")

    if not isinstance(method, str) or not method:
        return jsonrpc_error(rpc_id, -32600, "Invalid request")

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            protocol_version = DEFAULT_PROTOCOL_VERSION
        logger.debug("mcp initialize requested protocol=%s", protocol_version, extra={"request_id": request_id})
        return jsonrpc_success(
            rpc_id,
            {
                "protocolVersion": protocol_version,
                "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
                "capabilities": {"tools": {"listChanged": False}},
            },
        )

    if method in ("notifications/initialized", "initialized"):
        logger.debug("mcp initialized notification received", extra={"request_id": request_id})
        return None

    if method == "ping":
        return jsonrpc_success(rpc_id, {})

    if method in ("tools/list", "list_tools"):
        return jsonrpc_success(rpc_id, {"tools": list_tools()})

    if method in ("tools/call", "call_tool"):
        tool_name = params.get("name") or params.get("tool")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = params.get("params") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return jsonrpc_error(rpc_id, -32602, "Invalid params")
        logger.info("Tool called name=%s", tool_name, extra={"tool": tool_name, "request_id": request_id})
        start = time.perf_counter()
        envelope = await call_tool(tool_name, arguments, registry)
        duration_ms = (time.perf_counter() - start) * 1000
        log_tool_result(tool_name, envelope, request_id, duration_ms=duration_ms)
        return jsonrpc_success(rpc_id, wrap_tool_result(envelope))

    return jsonrpc_error(rpc_id, -32601, "Method not found")
