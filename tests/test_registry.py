"""Tool Registry Tests."""

import pytest

from gitai_tools.base import BaseTool, ToolInput, ToolMetadata, ToolResult
from gitai_tools.registry import ToolRegistry


class MockTool(BaseTool):
    name = "mock_tool"
    description = "Mock tool"
    metadata = ToolMetadata(capabilities=("test.mock",))

    async def run(self, ctx, args):
        return ToolResult.ok("mock ran")


class OtherMockTool(MockTool):
    description = "Replacement mock tool"


class SyncProvider:
    def __init__(self, *tools):
        self.tools = list(tools)

    def get_tools(self):
        return self.tools


class AsyncProvider(SyncProvider):
    async def get_tools(self):
        return self.tools


def test_register_and_retrieve_tool():
    """Test tool registration and retrieval."""
    registry = ToolRegistry()
    tool = MockTool()

    assert registry.register(tool) is False
    assert registry.get("mock_tool") is tool
    assert "mock_tool" in registry
    assert registry.get("missing") is None


def test_filter_by_capability():
    """Test capability-based filtering."""
    registry = ToolRegistry()
    registry.register(MockTool())

    results = registry.filter_by_capability("test.mock")
    assert len(results) == 1
    assert results[0].name == "mock_tool"
    assert registry.filter_by_capability("other") == []


def test_register_same_name_last_wins():
    registry = ToolRegistry()
    first, second = MockTool(), OtherMockTool()

    registry.register(first)
    replaced = registry.register(second)

    assert replaced is True
    assert registry.get("mock_tool") is second
    assert len(registry) == 1


def test_register_without_name_rejected():
    class Nameless:
        input_model = ToolInput

    with pytest.raises(ValueError):
        ToolRegistry().register(Nameless())


@pytest.mark.asyncio
async def test_build_from_providers_keeps_one_tool_per_name():
    registry = await ToolRegistry.build(
        [SyncProvider(MockTool()), AsyncProvider(OtherMockTool())]
    )

    names = [tool.name for tool in registry.list_tools()]
    assert names.count("mock_tool") == 1
    assert registry.get("mock_tool").description == "Replacement mock tool"


@pytest.mark.asyncio
async def test_register_provider_accepts_async_get_tools():
    registry = ToolRegistry()
    count = await registry.register_provider(AsyncProvider(MockTool()))

    assert count == 1
    assert registry.names() == ["mock_tool"]


def test_describe_includes_input_schema():
    registry = ToolRegistry()
    registry.register(MockTool())

    [entry] = registry.describe()
    assert entry["name"] == "mock_tool"
    assert entry["description"] == "Mock tool"
    assert entry["inputSchema"]["type"] == "object"
    assert entry["inputSchema"]["properties"] == {}
