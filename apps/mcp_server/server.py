"""
MCP stdio server.

``tools/list`` returns the registry's descriptions. ``tools/call`` dispatches
and returns the formatted result as a single text block; dispatch errors are
answered with JSON-RPC errors:

- ToolNotFoundError -> METHOD_NOT_FOUND (-32601)
- InvalidToolArgumentsError -> INVALID_PARAMS (-32602)
- ToolExecutionError -> INTERNAL_ERROR (-32603)

stdout carries the protocol stream; logging goes to stderr.
"""

from pathlib import Path
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from apps import __version__
from gitai_config.settings import Settings
from gitai_obs.logging import get_logger
from gitai_tools.catalogue import create_dispatcher
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.exceptions import DispatchError

logger = get_logger(__name__)

SERVER_NAME = "git-for-me-dear-ai"


def to_mcp_tools(dispatcher: ToolDispatcher) -> list[types.Tool]:
    return [
        types.Tool(
            name=entry["name"],
            description=entry["description"],
            inputSchema=entry["inputSchema"],
        )
        for entry in dispatcher.list_tools()
    ]


def to_mcp_error(error: DispatchError) -> McpError:
    data: Any = None
    if error.tool_name:
        data = {"tool": error.tool_name}
    details = getattr(error, "errors", None)
    if details:
        data = {**(data or {}), "details": details}
    return McpError(types.ErrorData(code=error.jsonrpc_code, message=error.message, data=data))


async def handle_call_tool(
    dispatcher: ToolDispatcher, name: str, arguments: dict[str, Any] | None
) -> list[types.TextContent]:
    """Dispatch one call. Raises ``McpError`` for dispatch errors."""
    try:
        response = await dispatcher.dispatch(name, arguments or {})
    except DispatchError as e:
        logger.warning("mcp_call_rejected", tool=name, code=e.code, error=e.message)
        raise to_mcp_error(e) from e
    return [types.TextContent(type="text", text=response.text)]


def create_server(dispatcher: ToolDispatcher) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return to_mcp_tools(dispatcher)

    # Registered directly rather than through @server.call_tool(), which
    # would turn McpError into a tool result instead of a JSON-RPC error.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await handle_call_tool(dispatcher, request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def run_stdio(settings: Settings, working_directory: Path | None = None) -> None:
    dispatcher = await create_dispatcher(settings, working_directory)
    server = create_server(dispatcher)
    logger.info("mcp_server_starting", transport="stdio", tools=len(dispatcher.registry))

    async with stdio_server() as (read_stream, write_stream):
        try:
            await server.run(read_stream, write_stream, server.create_initialization_options())
        except Exception:
            logger.critical("mcp_server_crashed", exc_info=True)
            raise
    logger.info("mcp_server_stopped")
