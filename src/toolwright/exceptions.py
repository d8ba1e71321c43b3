"""Toolwright exception hierarchy.

All Toolwright-specific exceptions inherit from ToolwrightError.
"""

from __future__ import annotations


class ToolwrightError(Exception):
    """Base exception for all Toolwright errors."""


class InvalidConfigurationError(ToolwrightError):
    """Raised when an agent or client is built from an invalid configuration."""


class SchemaError(ToolwrightError):
    """Raised when an argument type description is malformed.

    Covers duplicate field or variant names, empty unions, unresolved
    type references and conflicting named types.
    """


class UpstreamError(ToolwrightError):
    """Raised when the chat transport fails (network, HTTP or protocol).

    The agent loop never retries these; retry policy belongs to the client.
    """


# ---------------------------------------------------------------------------
# Agent loop errors
# ---------------------------------------------------------------------------


class AgentError(ToolwrightError):
    """Base for failures of an agent loop invocation."""


class EmptyResponseError(AgentError):
    """Raised when the model answers with neither text nor tool calls."""

    def __init__(self) -> None:
        super().__init__("Model returned no content and no tool calls")


class NoToolsConfiguredError(AgentError):
    """Raised when the model requests tool calls but the agent has no tools."""

    def __init__(self, tool_names: list[str] | None = None) -> None:
        self.tool_names = tool_names or []
        msg = "Model requested tool calls but the agent has no tools configured"
        if self.tool_names:
            msg += f": {', '.join(self.tool_names)}"
        super().__init__(msg)


class MaxIterationsExceededError(AgentError):
    """Raised when the loop hits its iteration cap without a final answer."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Agent exceeded maximum iterations: {max_iterations}")


# ---------------------------------------------------------------------------
# Tool errors
# ---------------------------------------------------------------------------


class ToolError(ToolwrightError):
    """Base for tool registration and dispatch errors."""


class DuplicateToolError(ToolError):
    """Raised when registering a tool whose name is already taken."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool already registered: {tool_name}")


class ToolNotFoundError(ToolError):
    """Raised when dispatching to a tool name that is not registered."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {tool_name}")


class InvalidArgumentsError(ToolError):
    """Raised when a tool-call payload does not match the declared arguments.

    Attributes:
        tool_name: Tool the payload was meant for, when known.
        errors: Structured validation errors (pydantic ``errors()`` shape).
    """

    def __init__(
        self,
        message: str,
        *,
        tool_name: str | None = None,
        errors: list[dict] | None = None,
    ) -> None:
        self.tool_name = tool_name
        self.errors = errors or []
        if tool_name:
            message = f"Invalid arguments for tool '{tool_name}': {message}"
        super().__init__(message)


class ToolExecutionError(ToolError):
    """Raised when a tool fails while handling a call.

    Attributes:
        tool_name: Name of the tool that failed.
        cause: The underlying exception.
    """

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
