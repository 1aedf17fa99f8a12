"""
Application Settings (Pydantic Settings).

Loads configuration from, highest precedence first:
- keyword arguments passed to ``Settings(...)``
- environment variables (case-insensitive)
- a ``.env`` file in the working directory
- the first JSON config file found among ``./.gitformeDearai.json``,
  ``./gitformeDearai.config.json`` and ``~/.gitformeDearai.json``
- field defaults

Config files use camelCase keys::

    {"githubToken": "ghp_...", "defaultRemote": "upstream", "gitmojis": false}
"""

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAMES = (".gitformeDearai.json", "gitformeDearai.config.json")
HOME_CONFIG_FILE_NAME = ".gitformeDearai.json"

# camelCase config-file keys -> settings field names
CONFIG_FILE_KEYS = {
    "githubToken": "GITHUB_TOKEN",
    "defaultRemote": "GIT_DEFAULT_REMOTE",
    "autoCommitConventions": "GIT_AUTO_CONVENTIONS",
    "gitmojis": "GIT_GITMOJIS",
}


def default_config_paths() -> list[Path]:
    """Config file candidates in lookup order."""
    cwd = Path.cwd()
    return [*(cwd / name for name in CONFIG_FILE_NAMES), Path.home() / HOME_CONFIG_FILE_NAME]


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading the first parseable JSON config file."""

    def __init__(self, settings_cls: type[BaseSettings], paths: list[Path] | None = None):
        super().__init__(settings_cls)
        self.paths = paths if paths is not None else default_config_paths()
        self.path: Path | None = None
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        for path in self.paths:
            if not path.is_file():
                continue
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("config_file_unreadable", path=str(path), error=str(e))
                continue
            if not isinstance(raw, dict):
                logger.warning("config_file_unreadable", path=str(path), error="not a JSON object")
                continue

            self.path = path
            logger.debug("config_file_loaded", path=str(path))
            return self._normalize(raw)
        return {}

    def _normalize(self, raw: dict[str, Any]) -> dict[str, Any]:
        fields = {name.upper(): name for name in self.settings_cls.model_fields}
        data = {}
        for key, value in raw.items():
            name = CONFIG_FILE_KEYS.get(key) or fields.get(key.upper())
            if name is not None:
                data[name] = value
        return data

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and config files.

    Field names double as environment variable names.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # GIT
    # ========================================================================
    GIT_DEFAULT_REMOTE: str = Field(default="origin", min_length=1)
    GIT_AUTO_CONVENTIONS: bool = Field(
        default=True, description="Format commit messages as conventional commits"
    )
    GIT_GITMOJIS: bool = Field(default=True, description="Allow gitmoji prefixes on commits")
    GIT_BINARY: str = Field(default="git")

    # ========================================================================
    # GITKRAKEN CLI
    # ========================================================================
    GITKRAKEN_BINARY: str = Field(default="gk")
    GITKRAKEN_PROBE_FEATURES: bool = Field(
        default=False,
        description="Probe each gk subcommand instead of assuming every feature is present",
    )

    # ========================================================================
    # PROCESS EXECUTION
    # ========================================================================
    MAX_CONCURRENT_PROCESSES: int = Field(default=6, ge=1)
    COMMAND_TIMEOUT_SECONDS: float = Field(default=120.0, gt=0)

    # ========================================================================
    # GITHUB
    # ========================================================================
    GITHUB_TOKEN: str | None = Field(default=None, description="GitHub personal access token")
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    GITHUB_TIMEOUT_SECONDS: int = Field(default=30, ge=1)

    # ========================================================================
    # HTTP API SERVER
    # ========================================================================
    API_HOST: str = Field(default="127.0.0.1")
    API_PORT: int = Field(default=8000, ge=1, le=65535)

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # DEPLOYMENT
    # ========================================================================
    ENVIRONMENT: str = Field(
        default="development", pattern="^(development|staging|production)$"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            ConfigFileSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def github_enabled(self) -> bool:
        return bool(self.GITHUB_TOKEN)

    def redacted(self) -> dict[str, Any]:
        """Settings as a dict safe to print (token masked)."""
        data = self.model_dump()
        token = data.get("GITHUB_TOKEN")
        if token:
            data["GITHUB_TOKEN"] = f"{token[:4]}***" if len(token) > 8 else "***"
        return data
