"""Tool models: wire definitions and invokable tools.

``BaseTool`` is the one interface the registry dispatches through:
a name, a description, a parameter schema derived from an argument type,
and an ``invoke`` coroutine.  ``FunctionTool`` implements it for plain
functions and is what the ``tool`` decorator produces.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any

from toolwright.schema.generator import generate
from toolwright.schema.validation import ArgumentValidator

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from toolwright.schema.types import ArgumentType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    """A single tool definition for LLM consumption.

    Attributes:
        name: Tool name (e.g. "get_weather").
        description: Human-readable description of when/why to use this tool.
        parameters: JSON Schema dict describing tool parameters.
    """

    name: str
    description: str
    parameters: dict

    def to_openai(self) -> dict:
        """Convert to OpenAI function-calling format.

        Returns:
            Dict with "type": "function" and nested "function" object.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class BaseTool(ABC):
    """A named, schema-described action the model may request.

    Subclasses set ``name``, ``description`` and ``argument_type`` (either
    as class attributes or in ``__init__``) and implement ``invoke``.
    The parameter schema and validator are derived lazily, once.
    """

    name: str
    description: str
    argument_type: ArgumentType

    @cached_property
    def parameters(self) -> dict:
        """JSON Schema of the tool's arguments."""
        return generate(self.argument_type)

    @cached_property
    def validator(self) -> ArgumentValidator:
        return ArgumentValidator(self.argument_type)

    def decode(self, arguments: Any) -> Any:
        """Validate a raw argument payload into typed arguments.

        Raises:
            InvalidArgumentsError: If the payload does not match.
        """
        return self.validator.validate(arguments, tool_name=self.name)

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )

    @abstractmethod
    async def invoke(self, args: Any) -> str:
        """Run the tool with decoded arguments and return its text result."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionTool(BaseTool):
    """Tool that wraps a Python function taking one typed-arguments value.

    Coroutine functions are awaited; plain functions run in a worker
    thread so they do not block the event loop.  Non-string results are
    converted with ``str()``.
    """

    def __init__(
        self,
        func: Callable[[Any], Awaitable[Any] | Any],
        argument_type: ArgumentType,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> None:
        self.func = func
        self.argument_type = argument_type
        self.name = name or func.__name__
        self.description = description or inspect.getdoc(func) or ""

    async def invoke(self, args: Any) -> str:
        if inspect.iscoroutinefunction(self.func):
            result = await self.func(args)
        else:
            result = await asyncio.to_thread(self.func, args)
        return result if isinstance(result, str) else str(result)


def tool(
    argument_type: ArgumentType,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Callable[[Callable[[Any], Any]], FunctionTool]:
    """Decorator turning a function into a ``FunctionTool``.

    Usage::

        @tool(record("Add", field("a", INTEGER), field("b", INTEGER)))
        async def add(args):
            \"\"\"Add two integers.\"\"\"
            return str(args.a + args.b)

    The tool name defaults to the function name and the description to
    its docstring.
    """

    def decorator(func: Callable[[Any], Any]) -> FunctionTool:
        return FunctionTool(func, argument_type, name=name, description=description)

    return decorator
