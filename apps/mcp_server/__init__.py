"""
MCP Server.

Serves the tool catalogue over the Model Context Protocol on stdio.
"""

from apps.mcp_server.server import create_server, handle_call_tool, run_stdio, to_mcp_tools

__all__ = ["create_server", "handle_call_tool", "run_stdio", "to_mcp_tools"]
