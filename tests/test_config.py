"""Configuration Tests."""

import json

import pytest
from pydantic import ValidationError

from gitai_config.settings import Settings


def test_settings_load_defaults():
    """Test settings load with defaults."""
    settings = Settings()
    assert settings.GIT_DEFAULT_REMOTE == "origin"
    assert settings.GIT_AUTO_CONVENTIONS is True
    assert settings.GIT_GITMOJIS is True
    assert settings.GITHUB_TOKEN is None
    assert settings.github_enabled is False
    assert settings.API_PORT == 8000


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("GIT_DEFAULT_REMOTE", "upstream")
    monkeypatch.setenv("git_gitmojis", "false")

    settings = Settings()
    assert settings.GIT_DEFAULT_REMOTE == "upstream"
    assert settings.GIT_GITMOJIS is False


def test_config_file_camel_case_keys(tmp_path):
    (tmp_path / ".gitformeDearai.json").write_text(
        json.dumps({"githubToken": "ghp_fromfile", "defaultRemote": "fork", "gitmojis": False})
    )

    settings = Settings()
    assert settings.GITHUB_TOKEN == "ghp_fromfile"
    assert settings.GIT_DEFAULT_REMOTE == "fork"
    assert settings.GIT_GITMOJIS is False
    assert settings.github_enabled is True


def test_home_config_file_used_when_project_has_none(tmp_path):
    (tmp_path / "home" / ".gitformeDearai.json").write_text(json.dumps({"autoCommitConventions": False}))

    assert Settings().GIT_AUTO_CONVENTIONS is False


def test_project_config_file_wins_over_home(tmp_path):
    (tmp_path / "home" / ".gitformeDearai.json").write_text(json.dumps({"defaultRemote": "home"}))
    (tmp_path / "gitformeDearai.config.json").write_text(json.dumps({"defaultRemote": "project"}))

    assert Settings().GIT_DEFAULT_REMOTE == "project"


def test_environment_wins_over_config_file(tmp_path, monkeypatch):
    (tmp_path / ".gitformeDearai.json").write_text(json.dumps({"defaultRemote": "fork"}))
    monkeypatch.setenv("GIT_DEFAULT_REMOTE", "upstream")

    assert Settings().GIT_DEFAULT_REMOTE == "upstream"


def test_unparsable_config_file_is_skipped(tmp_path):
    (tmp_path / ".gitformeDearai.json").write_text("{not json")
    (tmp_path / "gitformeDearai.config.json").write_text(json.dumps({"defaultRemote": "second"}))

    assert Settings().GIT_DEFAULT_REMOTE == "second"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="LOUD")


def test_concurrency_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(MAX_CONCURRENT_PROCESSES=0)


def test_redacted_masks_token():
    data = Settings(GITHUB_TOKEN="ghp_abcdefghijkl").redacted()
    assert data["GITHUB_TOKEN"] == "ghp_***"
    assert Settings().redacted()["GITHUB_TOKEN"] is None
