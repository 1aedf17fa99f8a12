"""
git-for-me-dear-ai Tools Package.

Provides:
- Tool interface and result envelope (base)
- Registry and dispatcher
- Capability detection for optional binaries
- Safety gates for destructive operations
- Adapters for git, GitHub, GitKraken CLI and system installers
"""

from gitai_tools.base import BaseTool, ToolContext, ToolInput, ToolMetadata, ToolResult
from gitai_tools.dispatcher import ToolDispatcher, ToolResponse
from gitai_tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolContext",
    "ToolInput",
    "ToolMetadata",
    "ToolResult",
    "ToolDispatcher",
    "ToolResponse",
    "ToolRegistry",
]
