"""ToolRegistry: name-unique set of tools with async dispatch.

Provides ``dispatch()``, which looks up the tool by name, validates the raw
arguments against its declared type, invokes it and returns its text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from toolwright.exceptions import DuplicateToolError, ToolExecutionError, ToolNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from toolwright.toolkit.models import BaseTool, ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Dispatch table from tool name to tool.

    Built once, then read; it holds no per-call state, so one registry can
    serve many agent runs.

    Usage::

        registry = ToolRegistry([add, get_weather])
        text = await registry.dispatch("add", {"a": 2, "b": 2})
    """

    def __init__(self, tools: Iterable[BaseTool] = ()) -> None:
        self._tools: dict[str, BaseTool] = {}
        for t in tools:
            self.register(t)

    def register(self, tool: BaseTool) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: If a tool with the same name exists.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool %s", tool.name)

    def get(self, name: str) -> BaseTool:
        """Return the tool registered under ``name``.

        Raises:
            ToolNotFoundError: If no such tool exists.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def names(self) -> list[str]:
        """Return the names of all registered tools, in registration order."""
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        """Return a fresh list of {name, description, schema} definitions."""
        return [t.definition() for t in self._tools.values()]

    def to_openai(self) -> list[dict]:
        """Return the definitions in OpenAI function-calling format."""
        return [d.to_openai() for d in self.definitions()]

    async def dispatch(self, name: str, arguments: Any) -> str:
        """Validate ``arguments`` and invoke the named tool.

        No retries: a tool that must tolerate repeated calls has to be
        idempotent itself.

        Args:
            name: Tool name from the model's tool-call request.
            arguments: Untyped JSON-compatible argument payload.

        Returns:
            The tool's text result.

        Raises:
            ToolNotFoundError: If ``name`` is not registered.
            InvalidArgumentsError: If ``arguments`` does not match the tool.
            ToolExecutionError: If the tool itself raises.
        """
        tool = self.get(name)
        args = tool.decode(arguments)
        logger.debug("Dispatching tool %s", name)
        try:
            return await tool.invoke(args)
        except Exception as exc:
            logger.debug("Tool %s failed: %s", name, exc, exc_info=True)
            raise ToolExecutionError(name, exc) from exc

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(list(self._tools.values()))

    def __repr__(self) -> str:
        return f"ToolRegistry(tools={self.names()!r})"
