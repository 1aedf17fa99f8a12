"""MCP transport tests: tool listing, calls and JSON-RPC error mapping."""

import pytest
from mcp import types
from mcp.shared.exceptions import McpError
from pydantic import Field

from apps.mcp_server.server import create_server, handle_call_tool, to_mcp_error, to_mcp_tools
from gitai_tools.base import BaseTool, ToolInput, ToolResult
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.exceptions import ToolExecutionError
from gitai_tools.registry import ToolRegistry


class CountInput(ToolInput):
    upto: int = Field(..., ge=1)


class CountTool(BaseTool):
    name = "count"
    description = "Count up to a number"
    input_model = CountInput

    async def run(self, ctx, args):
        if args.upto > 3:
            return ToolResult.fail("Too far", error=f"{args.upto} is more than 3")
        return ToolResult.ok("Counted", data=list(range(1, args.upto + 1)))


@pytest.fixture
def dispatcher(ctx):
    registry = ToolRegistry()
    registry.register(CountTool())
    return ToolDispatcher(registry, ctx)


def test_to_mcp_tools(dispatcher):
    (tool,) = to_mcp_tools(dispatcher)

    assert tool.name == "count"
    assert tool.description == "Count up to a number"
    assert tool.inputSchema["properties"]["upto"]["minimum"] == 1


@pytest.mark.asyncio
async def test_call_returns_formatted_text(dispatcher):
    (content,) = await handle_call_tool(dispatcher, "count", {"upto": 2})

    assert content.type == "text"
    assert content.text == "✅ Counted\n\n[\n  1,\n  2\n]"


@pytest.mark.asyncio
async def test_failed_result_is_not_a_protocol_error(dispatcher):
    (content,) = await handle_call_tool(dispatcher, "count", {"upto": 5})
    assert content.text == "❌ Too far\n\nError: 5 is more than 3"


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found(dispatcher):
    with pytest.raises(McpError) as excinfo:
        await handle_call_tool(dispatcher, "nope", None)

    assert excinfo.value.error.code == -32601
    assert excinfo.value.error.message == "Tool 'nope' not found"
    assert excinfo.value.error.data == {"tool": "nope"}


@pytest.mark.asyncio
async def test_invalid_arguments_are_invalid_params(dispatcher):
    with pytest.raises(McpError) as excinfo:
        await handle_call_tool(dispatcher, "count", {"upto": 0})

    error = excinfo.value.error
    assert error.code == -32602
    assert error.data["details"][0]["loc"] == "upto"


def test_execution_error_is_internal_error():
    error = to_mcp_error(ToolExecutionError("Tool execution failed: boom", tool_name="count"))
    assert error.error.code == -32603
    assert error.error.data == {"tool": "count"}


@pytest.mark.asyncio
async def test_server_call_handler(dispatcher):
    server = create_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="count", arguments={"upto": 1}),
        )
    )

    assert result.root.isError is False
    assert result.root.content[0].text == "✅ Counted\n\n[\n  1\n]"
    assert types.ListToolsRequest in server.request_handlers
