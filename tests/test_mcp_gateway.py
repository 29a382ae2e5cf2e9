import json

import pytest

from secret_mcp import mcp
from secret_mcp.metrics import default_metrics

from helpers import ADDRESS, FullStubChain, StubChain, registry_with

EXPECTED_TOOLS = {
    "get_network_status",
    "get_block_info",
    "get_transaction_info",
    "get_latest_blocks",
    "get_token_balance",
    "get_snip20_token_info",
    "get_snip20_balance",
    "list_known_tokens",
    "query_contract",
    "get_contract_info",
    "list_known_contracts",
    "get_contract_code_info",
}


def test_list_tools_exposes_every_tool_with_schema():
    tools = mcp.list_tools()
    assert {tool["name"] for tool in tools} == EXPECTED_TOOLS
    for tool in tools:
        assert tool["inputSchema"]["type"] == "object"
        assert set(tool) == {"name", "description", "inputSchema"}


def test_validate_arguments():
    tool = mcp.TOOL_REGISTRY["get_block_info"]
    assert mcp.validate_arguments(tool, {"height": 5}) is None
    assert mcp.validate_arguments(tool, {}) == "Missing required argument: height"
    assert mcp.validate_arguments(tool, {"height": "5"}) == "Argument 'height' must be of type integer"
    assert mcp.validate_arguments(tool, {"height": True}) == "Argument 'height' must be of type integer"
    assert mcp.validate_arguments(tool, {"height": 5.0}) == "Argument 'height' must be of type integer"
    assert mcp.validate_arguments(tool, []) == "Arguments must be an object"


@pytest.mark.asyncio
async def test_call_tool_unknown_and_missing_args():
    registry = registry_with(StubChain())
    unknown = await mcp.call_tool("bogus", {}, registry)
    assert unknown["success"] is False
    assert unknown["error"] == "Unknown tool: bogus"

    missing = await mcp.call_tool("get_token_balance", {}, registry)
    assert missing["error"] == "Missing required argument: address"


@pytest.mark.asyncio
async def test_call_tool_dispatches_by_category():
    chain = FullStubChain()
    registry = registry_with(chain)
    result = await mcp.call_tool("get_token_balance", {"address": ADDRESS}, registry)
    assert result["success"] is True
    assert ("get_token_balance", ADDRESS, None) in chain.calls

    code = await mcp.call_tool("get_contract_code_info", {"codeId": 2}, registry)
    assert code["data"]["codeId"] == 2


@pytest.mark.asyncio
async def test_call_tool_never_raises():
    class ExplodingChain(StubChain):
        async def get_network_status(self):
            raise ZeroDivisionError("kaboom")

    result = await mcp.call_tool("get_network_status", None, registry_with(ExplodingChain()))
    assert result["success"] is False
    assert result["error"] == "kaboom"


def test_wrap_tool_result_is_pretty_json_text():
    envelope = {"success": True, "data": {"a": 1}, "timestamp": "t"}
    wrapped = mcp.wrap_tool_result(envelope)
    assert wrapped["content"][0]["type"] == "text"
    assert wrapped["content"][0]["text"] == json.dumps(envelope, indent=2)


@pytest.mark.asyncio
async def test_jsonrpc_initialize_and_ping():
    registry = registry_with(StubChain())
    init = await mcp.handle_jsonrpc(
        {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"protocolVersion": "2025-03-26"}},
        registry,
    )
    assert init["result"]["protocolVersion"] == "2025-03-26"
    assert init["result"]["serverInfo"]["name"] == mcp.MCP_SERVER_NAME
    assert init["result"]["capabilities"] == {"tools": {"listChanged": False}}

    default = await mcp.handle_jsonrpc({"jsonrpc": "2.0", "id": 2, "method": "initialize"}, registry)
    assert default["result"]["protocolVersion"] == mcp.DEFAULT_PROTOCOL_VERSION

    pong = await mcp.handle_jsonrpc({"jsonrpc": "2.0", "id": 3, "method": "ping"}, registry)
    assert pong == {"jsonrpc": "2.0", "id": 3, "result": {}}


@pytest.mark.asyncio
async def test_jsonrpc_notification_has_no_response():
    registry = registry_with(StubChain())
    assert await mcp.handle_jsonrpc({"jsonrpc": "2.0", "method": "notifications/initialized"}, registry) is None


@pytest.mark.asyncio
async def test_jsonrpc_errors():
    registry = registry_with(StubChain())
    assert (await mcp.handle_jsonrpc([], registry))["error"]["code"] == -32600
    assert (await mcp.handle_jsonrpc({"id": 1}, registry))["error"]["code"] == -32600
    assert (await mcp.handle_jsonrpc({"id": 1, "method": "nope"}, registry))["error"]["code"] == -32601
    bad_params = await mcp.handle_jsonrpc({"id": 1, "method": "tools/call", "params": [1]}, registry)
    assert bad_params["error"]["code"] == -32602
    no_name = await mcp.handle_jsonrpc({"id": 1, "method": "tools/call", "params": {}}, registry)
    assert no_name["error"]["code"] == -32602


@pytest.mark.asyncio
async def test_jsonrpc_tools_call_records_metrics():
    registry = registry_with(StubChain())
    response = await mcp.handle_jsonrpc(
        {"jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "get_network_status", "arguments": {}}},
        registry,
    )
    envelope = json.loads(response["result"]["content"][0]["text"])
    assert envelope["success"] is True
    assert envelope["data"]["latestBlockHeight"] == 100

    await mcp.handle_jsonrpc(
        {"jsonrpc": "2.0", "id": 8, "method": "tools/call", "params": {"name": "get_block_info", "arguments": {"height": 0}}},
        registry,
    )
    snapshot = default_metrics.snapshot()
    assert snapshot["tool_success"] == {"get_network_status": 1}
    assert snapshot["tool_error"] == {"get_block_info": 1}
    assert "get_network_status" in snapshot["last_tool_duration_ms"]
