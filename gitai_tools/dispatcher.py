"""Tool Dispatcher.

Resolves a tool by name, validates the arguments against its input model and
executes it. Whatever the tool returns is a successful dispatch, failed
``ToolResult`` included. Dispatch errors are raised as ``DispatchError``
subclasses for the transport to translate.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from gitai_obs.logging import get_logger
from gitai_obs.metrics import tool_execution_duration, tool_executions_total
from gitai_tools.base import ToolContext, ToolResult
from gitai_tools.exceptions import (
    InvalidToolArgumentsError,
    ToolExecutionError,
    ToolNotFoundError,
)
from gitai_tools.registry import ToolRegistry

logger = get_logger(__name__)


def format_result(result: ToolResult) -> str:
    """Human-readable rendering of a result, as sent to protocol clients."""
    if result.success:
        lines = [f"✅ {result.message}"]
    else:
        lines = [f"❌ {result.message}"]
        if result.error:
            lines += ["", f"Error: {result.error}"]
    if result.data is not None:
        lines += ["", json.dumps(result.data, indent=2, ensure_ascii=False, default=str)]
    return "\n".join(lines)


def _validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


@dataclass(frozen=True)
class ToolResponse:
    """Outcome of a dispatch that produced a result."""

    tool_name: str
    result: ToolResult
    text: str
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.result.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.result.success,
            "message": self.result.message,
            "data": self.result.data,
            "error": self.result.error,
            "text": self.text,
        }


class ToolDispatcher:
    """Routes ``(name, arguments)`` calls to registered tools."""

    def __init__(self, registry: ToolRegistry, context: ToolContext):
        self.registry = registry
        self.context = context

    def list_tools(self) -> list[dict[str, Any]]:
        return self.registry.describe()

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        tool = self.registry.get(name)
        if tool is None:
            tool_executions_total.labels(tool_name=name, status="not_found").inc()
            logger.warning("tool_not_found", tool=name)
            raise ToolNotFoundError(f"Tool '{name}' not found", tool_name=name)

        try:
            args = tool.input_model.model_validate(dict(arguments or {}))
        except ValidationError as e:
            details = _validation_details(e)
            tool_executions_total.labels(tool_name=name, status="invalid_arguments").inc()
            logger.warning("tool_invalid_arguments", tool=name, errors=details)
            summary = "; ".join(f"{d['loc'] or 'arguments'}: {d['msg']}" for d in details)
            raise InvalidToolArgumentsError(
                f"Invalid arguments for tool '{name}': {summary}", tool_name=name, errors=details
            ) from e

        logger.info("tool_dispatch", tool=name)
        started = time.perf_counter()
        try:
            result = await tool.execute(self.context, args)
        except Exception as e:
            tool_executions_total.labels(tool_name=name, status="error").inc()
            logger.exception("tool_crashed", tool=name)
            raise ToolExecutionError(f"Tool execution failed: {e}", tool_name=name) from e
        finally:
            duration = time.perf_counter() - started
            tool_execution_duration.labels(tool_name=name).observe(duration)

        if not isinstance(result, ToolResult):
            tool_executions_total.labels(tool_name=name, status="error").inc()
            logger.error("tool_bad_result", tool=name, result_type=type(result).__name__)
            raise ToolExecutionError(
                f"Tool execution failed: '{name}' returned {type(result).__name__}, not a ToolResult",
                tool_name=name,
            )

        status = "success" if result.success else "failure"
        tool_executions_total.labels(tool_name=name, status=status).inc()
        logger.info("tool_completed", tool=name, status=status, duration=round(duration, 3))
        return ToolResponse(name, result, format_result(result), duration)
