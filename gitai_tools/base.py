"""Tool Interface & Metadata.

A tool is an object with a unique ``name``, a ``description``, a pydantic
``input_model`` describing its arguments and an async ``execute`` returning a
``ToolResult``. Most tools subclass ``BaseTool`` and implement ``run``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from gitai_obs.logging import get_logger
from gitai_tools.exceptions import ToolError

if TYPE_CHECKING:
    from gitai_config.settings import Settings
    from gitai_tools.adapters.github.client import GitHubClient
    from gitai_tools.process import CommandRunner, GitClient

logger = get_logger(__name__)


class ToolMetadata(BaseModel):
    """Tool capability metadata."""

    model_config = ConfigDict(frozen=True)

    destructive: bool = False
    dry_run_supported: bool = False
    idempotent: bool = False
    capabilities: tuple[str, ...] = ()
    risk_level: str = "low"


class ToolInput(BaseModel):
    """Base class for tool arguments.

    Wire names are camelCase (``dryRun``), attributes snake_case (``dry_run``).
    Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


@lru_cache(maxsize=None)
def input_schema_for(model: type[ToolInput]) -> dict[str, Any]:
    """JSON schema of a tool input model, computed once per model."""
    schema = model.model_json_schema(by_alias=True)
    schema.setdefault("properties", {})
    schema.setdefault("required", [])
    return schema


class ToolResult(BaseModel):
    """Result envelope returned by every tool.

    ``success`` is authoritative. ``error`` may only be set on failures.
    """

    success: bool
    message: str = Field(..., min_length=1)
    data: Any = None
    error: str | None = None

    @model_validator(mode="after")
    def _error_only_on_failure(self) -> "ToolResult":
        if self.success and self.error is not None:
            raise ValueError("error must be unset on a successful result")
        return self

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ToolResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: str | None = None, data: Any = None) -> "ToolResult":
        return cls(success=False, message=message, error=error, data=data)

    def to_dict(self) -> dict[str, Any]:
        """Envelope with unset optional fields omitted."""
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class ToolContext:
    """Read-only execution context shared by every tool call."""

    working_directory: Path
    config: "Settings"
    runner: "CommandRunner"
    git: "GitClient"
    github: "GitHubClient | None" = None


@runtime_checkable
class Tool(Protocol):
    """Tool interface."""

    name: str
    description: str
    metadata: ToolMetadata
    input_model: type[ToolInput]

    async def execute(self, ctx: ToolContext, args: ToolInput) -> ToolResult:
        """Execute tool action."""
        ...


@runtime_checkable
class ToolProvider(Protocol):
    """Source of tools for one functional area.

    ``get_tools`` may be sync or async. Gated providers return an empty list
    when the binary they depend on is missing.
    """

    def get_tools(self) -> Any:
        ...


class BaseTool:
    """Convenience base for tools.

    Subclasses set the class attributes and implement ``run``. ``ToolError``
    raised from ``run`` becomes a failed result whose message is
    ``failure_message`` formatted with the tool arguments.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    input_model: ClassVar[type[ToolInput]] = ToolInput
    metadata: ClassVar[ToolMetadata] = ToolMetadata()
    failure_message: ClassVar[str] = "Tool execution failed"

    @property
    def input_schema(self) -> dict[str, Any]:
        return input_schema_for(self.input_model)

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    async def execute(self, ctx: ToolContext, args: ToolInput) -> ToolResult:
        try:
            return await self.run(ctx, args)
        except ToolError as e:
            logger.warning("tool_failed", tool=self.name, error=e.message)
            return ToolResult.fail(self.describe_failure(args), error=e.message, data=e.data)

    async def run(self, ctx: ToolContext, args: Any) -> ToolResult:
        raise NotImplementedError

    def describe_failure(self, args: ToolInput) -> str:
        try:
            return self.failure_message.format(**args.model_dump())
        except (KeyError, IndexError):
            return self.failure_message
