"""Tests for the capability-gated GitKraken CLI tools."""

import pytest

from gitai_tools.adapters.gitkraken import GitKrakenProvider
from gitai_tools.adapters.gitkraken.tools import (
    GraphTool,
    WorkCommitAiTool,
    WorkListTool,
    WorkPrCreateAiTool,
    WorkspaceCreateTool,
    WorkspaceListTool,
)
from gitai_tools.capabilities import CapabilityDetector


@pytest.fixture
def detector(runner):
    return CapabilityDetector(runner, platform_name="linux")


def tool_names(tools):
    return [tool.name for tool in tools]


class TestProvider:
    @pytest.mark.asyncio
    async def test_no_tools_without_cli(self, runner, detector):
        runner.missing.add("gk")
        runner.fail("which", "gk")

        assert await GitKrakenProvider(detector).get_tools() == []

    @pytest.mark.asyncio
    async def test_all_tools_when_installed(self, runner, detector):
        runner.on("gk", "version", stdout="gk version 2.1.0\n")

        names = tool_names(await GitKrakenProvider(detector).get_tools())

        assert names == [
            "gk_graph",
            "gk_work_commit_ai",
            "gk_work_pr_create_ai",
            "gk_workspace_list",
            "gk_workspace_create",
            "gk_work_list",
            "gk_setup",
        ]

    @pytest.mark.asyncio
    async def test_probed_features_limit_tools(self, runner):
        runner.on("gk", "work", "--help", stdout="Usage: gk work [command]\n  list   List work items\n")
        runner.fail("gk", "workspace", "--help", stderr="unknown command")
        detector = CapabilityDetector(runner, probe_features=True, platform_name="linux")

        names = tool_names(await GitKrakenProvider(detector).get_tools())

        assert names == ["gk_graph", "gk_work_list", "gk_setup"]


class TestCommands:
    @pytest.mark.asyncio
    async def test_graph_arguments(self, call, runner, detector):
        result = await call(GraphTool(detector), branch="dev", limit=5, position="left")

        assert result.success is True
        assert ("gk", "graph", "--branch", "dev", "--limit", "5", "--left") in runner.calls
        assert result.data["branch"] == "dev"

    @pytest.mark.asyncio
    async def test_commit_ai_arguments(self, call, runner, detector):
        runner.on("gk", "work", "commit", "--ai", "--message", "wip", "--all", stdout="Committed 1a2b3c4\n")

        result = await call(WorkCommitAiTool(detector), message="wip", all=True)

        assert result.data["result"] == "Committed 1a2b3c4"
        assert result.data["aiGenerated"] is True

    @pytest.mark.asyncio
    async def test_pr_create_ai_arguments(self, call, runner, detector):
        await call(WorkPrCreateAiTool(detector), title="Search", base="develop", draft=True)
        assert ("gk", "work", "pr", "create", "--ai", "--title", "Search", "--base", "develop", "--draft") in runner.calls

    @pytest.mark.asyncio
    async def test_json_output_is_decoded(self, call, runner, detector):
        runner.on("gk", "workspace", "list", "--detailed", stdout='[{"name": "team", "repos": 3}]')

        result = await call(WorkspaceListTool(detector), detailed=True)

        assert result.data == [{"name": "team", "repos": 3}]

    @pytest.mark.asyncio
    async def test_workspace_create_joins_repos(self, call, runner, detector):
        result = await call(WorkspaceCreateTool(detector), name="team", repos=["./api", "./web"])

        assert result.message == 'Workspace "team" created successfully'
        assert ("gk", "workspace", "create", "team", "--repos", "./api,./web") in runner.calls

    @pytest.mark.asyncio
    async def test_command_failure(self, call, runner, detector):
        runner.fail("gk", "work", "list", "--status", "all", "--limit", "10", stderr="not logged in")

        result = await call(WorkListTool(detector), status="all")

        assert result.success is False
        assert result.message == "Failed to list work items"
        assert result.error == "not logged in"

    @pytest.mark.asyncio
    async def test_cli_missing_at_call_time(self, call, runner, detector):
        runner.missing.add("gk")
        runner.fail("which", "gk")

        result = await call(WorkListTool(detector))

        assert result.success is False
        assert result.error == "GitKraken CLI is not available on this system"
