"""Tool system exceptions.

Two families:

- ``DispatchError`` and subclasses are raised by the dispatcher when a call
  cannot produce a result (unknown tool, bad arguments, crashed tool). The
  transports map them onto protocol errors.
- ``ToolError`` and subclasses are expected domain failures raised inside a
  tool. ``BaseTool.execute`` turns them into a failed ``ToolResult``.
"""

from typing import Any


class DispatchError(Exception):
    """Base exception for dispatch failures."""

    code = "INTERNAL_ERROR"
    jsonrpc_code = -32603

    def __init__(self, message: str, tool_name: str | None = None):
        super().__init__(message)
        self.message = message
        self.tool_name = tool_name

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ToolNotFoundError(DispatchError):
    """No tool is registered under the requested name."""

    code = "NOT_FOUND"
    jsonrpc_code = -32601


class InvalidToolArgumentsError(DispatchError):
    """Arguments do not satisfy the tool's input schema."""

    code = "INVALID_PARAMS"
    jsonrpc_code = -32602

    def __init__(
        self,
        message: str,
        tool_name: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, tool_name)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "details": self.errors}


class ToolExecutionError(DispatchError):
    """A tool raised instead of returning a result."""

    code = "INTERNAL_ERROR"
    jsonrpc_code = -32603


class ToolError(Exception):
    """Expected failure inside a tool, reported as a failed result."""

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data


class PreconditionError(ToolError):
    """Arguments are well-formed but the requested action cannot proceed."""

    pass


class CommandError(ToolError):
    """External command exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        argv: list[str] | None = None,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.argv = argv or []
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class CommandNotFoundError(CommandError):
    """External binary is missing or cannot be executed."""

    pass


class CommandTimeoutError(CommandError):
    """External command exceeded its time limit and was killed."""

    pass
