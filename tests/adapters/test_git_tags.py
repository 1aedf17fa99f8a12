"""Tests for tag tools."""

import pytest

from gitai_tools.adapters.git.tools import TagDeleteTool, TagListTool, TagPushTool, TagTool
from gitai_tools.adapters.git.tools.tags import TAG_FORMAT, parse_tag_line


class TestTagDeleteTool:
    @pytest.mark.asyncio
    async def test_partial_failure_reports_each_tag(self, call, runner):
        runner.fail("git", "tag", "--delete", "b", stderr="error: could not delete 'b'")

        result = await call(TagDeleteTool(), tags=["a", "b"])

        assert result.success is False
        assert result.data["deleted"] == ["a"]
        assert result.data["failed"] == ["b"]
        assert result.data["errors"] == [
            {"tag": "b", "success": False, "error": "error: could not delete 'b'"}
        ]
        assert result.message == "Deleted 1 of 2 tags"

    @pytest.mark.asyncio
    async def test_missing_tag_counts_as_failure(self, call, runner):
        runner.fail("git", "rev-parse", "--verify", "--quiet", "refs/tags/gone")

        result = await call(TagDeleteTool(), tags=["v1.0", "gone"])

        assert result.success is False
        assert result.data["deleted"] == ["v1.0"]
        assert result.data["failed"] == ["gone"]
        assert result.data["nonExistent"] == ["gone"]
        assert not runner.called("git", "tag", "--delete", "gone")

    @pytest.mark.asyncio
    async def test_all_missing_fails_early(self, call, runner):
        runner.fail("git", "rev-parse", "--verify", "--quiet", "refs/tags/gone")

        result = await call(TagDeleteTool(), tags=["gone"])

        assert result.success is False
        assert result.message == "None of the specified tags exist"
        assert result.data == {"nonExistentTags": ["gone"]}

    @pytest.mark.asyncio
    async def test_all_deleted(self, call, runner):
        result = await call(TagDeleteTool(), tags=["a", "b"])

        assert result.success is True
        assert result.data["deleted"] == ["a", "b"]
        assert result.data["failed"] == []

    @pytest.mark.asyncio
    async def test_dry_run_deletes_nothing(self, call, runner):
        result = await call(TagDeleteTool(), tags=["a", "b"], dryRun=True)

        assert result.success is True
        assert result.data["preview"] == ["git tag --delete a", "git tag --delete b"]
        assert runner.git_calls("tag") == []


class TestTagTool:
    @pytest.mark.asyncio
    async def test_existing_tag_blocked_without_force(self, call, runner):
        result = await call(TagTool(), name="v1.0")

        assert result.success is False
        assert result.error == "Tag already exists"
        assert result.data["blocked"] == "tag_exists"
        assert runner.git_calls("tag") == []

    @pytest.mark.asyncio
    async def test_create_annotated_tag(self, call, runner):
        runner.fail("git", "rev-parse", "--verify", "--quiet", "refs/tags/v2.0")
        runner.on(
            "git", "tag", "--list", f"--format={TAG_FORMAT}", "v2.0",
            stdout="v2.0\x1ftag\x1fdeadbeef00\x1fcafebabe1234\x1fRelease 2\x1fAda\x1f\x1f2024-05-01 10:00:00 +0000\n",
        )

        result = await call(TagTool(), name="v2.0", message="Release 2")

        assert result.success is True
        assert ("git", "tag", "--message", "Release 2", "v2.0") in runner.calls
        assert result.data["type"] == "annotated"
        assert result.data["commit"] == "cafebabe"
        assert result.data["tagger"] == "Ada"

    @pytest.mark.asyncio
    async def test_invalid_name(self, call, runner):
        result = await call(TagTool(), name="bad name!")

        assert result.success is False
        assert result.error == "Invalid tag name format"
        assert runner.calls == []


def test_parse_lightweight_tag_line():
    tag = parse_tag_line("v0.1\x1fcommit\x1f0123456789ab\x1f\x1finitial\x1f\x1fGrace\x1f2024-01-01")
    assert tag["type"] == "lightweight"
    assert tag["commit"] == "01234567"
    assert tag["tagger"] == "Grace"


@pytest.mark.asyncio
async def test_tag_list_limits_and_reports_more(call, runner):
    runner.on(
        "git", "tag", "--list", "--sort=version:refname", f"--format={TAG_FORMAT}",
        stdout="v1\x1fcommit\x1faaa\nv2\x1fcommit\x1fbbb\nv3\x1fcommit\x1fccc\n",
    )

    result = await call(TagListTool(), sort="version", limit=2)

    assert result.data["tags"] == [{"name": "v1"}, {"name": "v2"}]
    assert result.data["hasMore"] is True


@pytest.mark.asyncio
async def test_tag_push_unknown_remote(call, runner):
    runner.on("git", "remote", stdout="origin\n")

    result = await call(TagPushTool(), remote="upstream", tags=["v1"])

    assert result.success is False
    assert result.error == "Remote not found"
    assert not runner.called("git", "push")


@pytest.mark.asyncio
async def test_tag_push_specific_tags(call, runner):
    runner.on("git", "remote", stdout="origin\n")

    result = await call(TagPushTool(), tags=["v1", "v2"])

    assert result.success is True
    assert ("git", "push", "origin", "refs/tags/v1:refs/tags/v1", "refs/tags/v2:refs/tags/v2") in runner.calls


@pytest.mark.asyncio
async def test_tag_push_delete(call, runner):
    runner.on("git", "remote", stdout="origin\n")

    result = await call(TagPushTool(), tags=["v1"], delete=True)

    assert result.message == "Tags deleted from origin successfully"
    assert ("git", "push", "origin", ":refs/tags/v1") in runner.calls
