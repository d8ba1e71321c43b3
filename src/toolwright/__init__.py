"""Toolwright: typed tools and a bounded tool-calling agent loop.

Describe a tool's arguments once, get its JSON Schema and a validated,
typed payload for free, and let an agent drive a chat-completion model
through tool calls until it produces a final answer.
"""

from toolwright._version import __version__

# Agent loop
from toolwright.agent import (
    DEFAULT_MAX_ITERATIONS,
    Agent,
    AgentBuilder,
    AgentConfig,
    AgentState,
    AgentTool,
)

# Conversation
from toolwright.conversation import Conversation, Message, Role, ToolCall

# Exceptions
from toolwright.exceptions import (
    AgentError,
    DuplicateToolError,
    EmptyResponseError,
    InvalidArgumentsError,
    InvalidConfigurationError,
    MaxIterationsExceededError,
    NoToolsConfiguredError,
    SchemaError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolwrightError,
    UpstreamError,
)

# Chat transport
from toolwright.llm import AsyncOpenAIClient, ChatClient, ChatResponse

# Argument types and schema
from toolwright.schema import (
    BOOLEAN,
    INTEGER,
    NUMBER,
    STRING,
    ArgumentType,
    ArgumentValidator,
    ArrayType,
    Field,
    OptionalType,
    Primitive,
    Record,
    TaggedUnion,
    TypeRef,
    Variant,
    array,
    field,
    generate,
    optional,
    record,
    ref,
    union,
    variant,
)

# Tools
from toolwright.toolkit import BaseTool, FunctionTool, ToolDefinition, ToolRegistry, tool

__all__ = [
    "__version__",
    # Agent loop
    "Agent",
    "AgentBuilder",
    "AgentConfig",
    "AgentState",
    "AgentTool",
    "DEFAULT_MAX_ITERATIONS",
    # Conversation
    "Conversation",
    "Message",
    "Role",
    "ToolCall",
    # Chat transport
    "AsyncOpenAIClient",
    "ChatClient",
    "ChatResponse",
    # Argument types and schema
    "ArgumentType",
    "ArgumentValidator",
    "Primitive",
    "STRING",
    "INTEGER",
    "NUMBER",
    "BOOLEAN",
    "ArrayType",
    "OptionalType",
    "TypeRef",
    "Field",
    "Record",
    "Variant",
    "TaggedUnion",
    "array",
    "optional",
    "ref",
    "field",
    "record",
    "variant",
    "union",
    "generate",
    # Tools
    "BaseTool",
    "FunctionTool",
    "ToolDefinition",
    "ToolRegistry",
    "tool",
    # Exceptions
    "ToolwrightError",
    "InvalidConfigurationError",
    "SchemaError",
    "UpstreamError",
    "AgentError",
    "EmptyResponseError",
    "NoToolsConfiguredError",
    "MaxIterationsExceededError",
    "ToolError",
    "DuplicateToolError",
    "ToolNotFoundError",
    "InvalidArgumentsError",
    "ToolExecutionError",
]
