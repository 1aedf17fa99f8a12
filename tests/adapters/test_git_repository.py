"""Tests for repository setup tools."""

import pytest

from gitai_tools.adapters.git.tools import CloneTool, ConfigTool, InitTool, RemoteTool
from gitai_tools.adapters.git.tools.repository import _clone_directory


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://github.com/octo/hello.git", "hello"),
        ("git@github.com:octo/hello.git", "hello"),
        ("https://example.com/repos/tool/", "tool"),
    ],
)
def test_clone_directory(url, expected):
    assert _clone_directory(url) == expected


@pytest.mark.asyncio
async def test_init_relative_path(call, runner, tmp_path):
    result = await call(InitTool(), path="project", defaultBranch="trunk")

    assert result.success is True
    assert runner.calls == [("git", "init", "--initial-branch", "trunk", str(tmp_path / "project"))]
    assert result.data["defaultBranch"] == "trunk"


@pytest.mark.asyncio
async def test_init_failure_reports_output(call, runner, tmp_path):
    runner.fail("git", "init", "--initial-branch", "main", str(tmp_path), stderr="fatal: cannot mkdir")

    result = await call(InitTool())

    assert result.success is False
    assert "cannot mkdir" in result.error


@pytest.mark.asyncio
async def test_shallow_clone(call, runner):
    result = await call(CloneTool(), url="https://github.com/octo/hello.git", depth=1, branch="dev")

    assert runner.calls == [("git", "clone", "--branch", "dev", "--depth", "1", "https://github.com/octo/hello.git")]
    assert result.message == "Repository cloned to hello"


class TestRemoteTool:
    @pytest.mark.asyncio
    async def test_verbose_list_groups_urls(self, call, runner):
        runner.on(
            "git", "remote", "-v",
            stdout=(
                "origin\tgit@github.com:octo/hello.git (fetch)\n"
                "origin\tgit@github.com:octo/hello.git (push)\n"
                "upstream\thttps://github.com/up/hello.git (fetch)\n"
            ),
        )

        result = await call(RemoteTool(), action="list", verbose=True)

        assert result.data == [
            {"name": "origin", "fetch": "git@github.com:octo/hello.git", "push": "git@github.com:octo/hello.git"},
            {"name": "upstream", "fetch": "https://github.com/up/hello.git"},
        ]

    @pytest.mark.asyncio
    async def test_add_requires_url(self, call, runner):
        result = await call(RemoteTool(), action="add", name="upstream")

        assert result.success is False
        assert result.message == "Failed to add remote"
        assert runner.calls == []


class TestConfigTool:
    @pytest.mark.asyncio
    async def test_set_global(self, call, runner):
        result = await call(ConfigTool(), action="set", key="user.name", value="Alice", **{"global": True})

        assert result.success is True
        assert runner.calls == [("git", "config", "--global", "user.name", "Alice")]

    @pytest.mark.asyncio
    async def test_list(self, call, runner):
        runner.on("git", "config", "--list", stdout="user.name=Alice\ncore.editor=vim -n\n")

        result = await call(ConfigTool(), action="list")

        assert result.data == {"entries": {"user.name": "Alice", "core.editor": "vim -n"}, "count": 2}
