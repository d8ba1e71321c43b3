"""Toolkit: invokable tools and the registry that dispatches them.

Tools pair a name and description with an argument type; their parameter
schema is generated from that type and exposed to the model in
function-calling format.
"""

from toolwright.toolkit.models import BaseTool, FunctionTool, ToolDefinition, tool
from toolwright.toolkit.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "FunctionTool",
    "ToolDefinition",
    "ToolRegistry",
    "tool",
]
