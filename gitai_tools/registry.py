"""Tool Registry.

Name-keyed catalogue of tools. Registering a name twice replaces the earlier
tool (last write wins); the replacement is logged and reported to the caller.
"""

import inspect
from typing import Any, Iterable, Iterator

from gitai_obs.logging import get_logger
from gitai_obs.metrics import registry_tools_registered
from gitai_tools.base import Tool, ToolProvider, input_schema_for

logger = get_logger(__name__)


def describe_tool(tool: Tool) -> dict[str, Any]:
    """Public description of a tool: name, description and input schema."""
    return {
        "name": tool.name,
        "description": tool.description,
        "inputSchema": input_schema_for(tool.input_model),
    }


class ToolRegistry:
    """Tool registry with capability-based lookup."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> bool:
        """Register a tool. Returns True when it replaced one of the same name."""
        if not getattr(tool, "name", None):
            raise ValueError(f"{type(tool).__name__} has no name")
        # compile the schema now so a broken input model fails at startup
        input_schema_for(tool.input_model)

        previous = self._tools.get(tool.name)
        self._tools[tool.name] = tool
        registry_tools_registered.set(len(self._tools))

        if previous is not None and previous is not tool:
            logger.warning(
                "tool_replaced",
                tool=tool.name,
                previous=type(previous).__name__,
                replacement=type(tool).__name__,
            )
            return True
        logger.debug("tool_registered", tool=tool.name)
        return False

    def register_all(self, tools: Iterable[Tool]) -> list[str]:
        """Register several tools, returning the names that replaced earlier ones."""
        return [tool.name for tool in tools if self.register(tool)]

    async def register_provider(self, provider: ToolProvider) -> int:
        """Register everything a provider offers. Sync and async providers both work."""
        tools = provider.get_tools()
        if inspect.isawaitable(tools):
            tools = await tools
        tools = list(tools)
        self.register_all(tools)
        logger.info("provider_registered", provider=type(provider).__name__, tools=len(tools))
        return len(tools)

    @classmethod
    async def build(cls, providers: Iterable[ToolProvider]) -> "ToolRegistry":
        """Registry populated from ``providers`` in order."""
        registry = cls()
        for provider in providers:
            await registry.register_provider(provider)
        logger.info("registry_built", tools=len(registry))
        return registry

    def get(self, name: str) -> Tool | None:
        """Get tool by name."""
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[Tool]:
        """Tools in registration order."""
        return list(self._tools.values())

    def describe(self) -> list[dict[str, Any]]:
        return [describe_tool(tool) for tool in self._tools.values()]

    def filter_by_capability(self, capability: str) -> list[Tool]:
        """Filter tools by capability tag."""
        return [t for t in self._tools.values() if capability in t.metadata.capabilities]
