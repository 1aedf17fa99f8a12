"""Command line tests."""

import json

import pytest

from apps import cli
from gitai_tools.capabilities import CapabilityDetector


@pytest.mark.parametrize(
    "name,category",
    [
        ("git_status", "git"),
        ("gh_pr_create", "github"),
        ("gk_graph", "gitkraken"),
        ("install_git", "system"),
    ],
)
def test_category_of(name, category):
    assert cli.category_of(name) == category


def test_start_is_the_default_command(monkeypatch):
    seen = {}

    def fake_start(args):
        seen["args"] = args
        return 0

    monkeypatch.setitem(cli.COMMANDS, "start", fake_start)

    assert cli.main(["-v"]) == 0
    assert seen["args"].command == "start"
    assert seen["args"].verbose is True
    assert seen["args"].transport == "stdio"


def test_config_show_redacts_token(monkeypatch, capsys):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_supersecret")

    assert cli.main(["config", "--show"]) == 0

    shown = json.loads(capsys.readouterr().out)
    assert shown["GITHUB_TOKEN"] == "ghp_***"
    assert shown["GIT_DEFAULT_REMOTE"] == "origin"


def test_config_validate_reports_errors(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    assert cli.main(["config", "--validate"]) == 1
    assert "LOG_LEVEL" in capsys.readouterr().err


def test_config_validate_ok(capsys):
    assert cli.main(["config", "--validate"]) == 0
    assert capsys.readouterr().out.strip() == "Configuration is valid"


def test_tools_by_category(monkeypatch, capsys, tmp_path):
    async def unavailable(self):
        return False

    monkeypatch.setattr(CapabilityDetector, "is_available", unavailable)

    assert cli.main(["tools", "--category", "system", "--cwd", str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert "install_gitkraken_cli" in out
    assert "git_status" not in out
    assert out.rstrip().endswith("4 tools")
