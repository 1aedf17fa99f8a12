"""Process runner and git output parsing tests."""

import sys

import pytest

from gitai_tools.exceptions import CommandError, CommandNotFoundError, CommandTimeoutError
from gitai_tools.process import CommandRunner, GitClient, parse_porcelain_status


def test_parse_status_with_rename_and_conflict():
    output = "## main...origin/main [ahead 2, behind 1]\0R  new.py\0old.py\0 M a.py\0UU c.py\0?? d.txt\0"

    status = parse_porcelain_status(output)

    assert status.branch == "main"
    assert status.tracking == "origin/main"
    assert (status.ahead, status.behind) == (2, 1)
    assert status.staged == ["new.py"]
    assert status.unstaged == ["a.py"]
    assert status.conflicted == ["c.py"]
    assert status.untracked == ["d.txt"]
    assert status.files[0].from_path == "old.py"
    assert status.is_clean is False


def test_parse_status_paths_with_spaces_are_not_quoted():
    status = parse_porcelain_status("## main\0 M my file.txt\0")
    assert status.unstaged == ["my file.txt"]


def test_parse_status_new_repository():
    status = parse_porcelain_status("## No commits yet on main\0")
    assert status.branch == "main"
    assert status.is_clean is True


def test_parse_status_detached_head():
    status = parse_porcelain_status("## HEAD (no branch)\0")
    assert status.detached is True
    assert status.branch is None


@pytest.mark.asyncio
async def test_runner_captures_output(tmp_path):
    runner = CommandRunner(cwd=tmp_path)
    result = await runner.run(sys.executable, ["-c", "print('hello')"])

    assert result.success is True
    assert result.stdout.strip() == "hello"
    assert result.output == "hello"


@pytest.mark.asyncio
async def test_runner_raises_on_non_zero_exit(tmp_path):
    runner = CommandRunner(cwd=tmp_path)
    script = "import sys; sys.stderr.write('bad things'); sys.exit(3)"

    with pytest.raises(CommandError) as exc_info:
        await runner.run(sys.executable, ["-c", script])
    assert exc_info.value.exit_code == 3
    assert exc_info.value.message == "bad things"

    result = await runner.run(sys.executable, ["-c", script], check=False)
    assert result.exit_code == 3


@pytest.mark.asyncio
async def test_runner_missing_binary(tmp_path):
    runner = CommandRunner(cwd=tmp_path)
    with pytest.raises(CommandNotFoundError):
        await runner.run("definitely-not-a-real-binary-7f3a", [])


@pytest.mark.asyncio
async def test_runner_timeout_kills_process(tmp_path):
    runner = CommandRunner(cwd=tmp_path)
    with pytest.raises(CommandTimeoutError):
        await runner.run(sys.executable, ["-c", "import time; time.sleep(10)"], timeout=0.5)


@pytest.mark.asyncio
async def test_git_client_helpers(runner):
    runner.on("git", "branch", "--show-current", stdout="feature/x\n")
    runner.on("git", "remote", stdout="origin\nupstream\n")
    runner.on("git", "stash", "list", stdout="stash@{0}: WIP\nstash@{1}: WIP\n")
    runner.fail("git", "rev-parse", "--verify", "--quiet", "refs/heads/nope")
    git = GitClient(runner)

    assert await git.current_branch() == "feature/x"
    assert await git.remotes() == ["origin", "upstream"]
    assert await git.stash_count() == 2
    assert await git.ref_exists("refs/heads/nope") is False
    assert await git.ref_exists("refs/heads/main") is True


@pytest.mark.asyncio
async def test_git_client_detached_branch_is_none(runner):
    runner.on("git", "branch", "--show-current", stdout="\n")
    assert await GitClient(runner).current_branch() is None
