"""Chat transport for Toolwright.

Provides an OpenAI-compatible async HTTP client, the pluggable ChatClient
protocol and the parsed ChatResponse type.
"""

from toolwright.llm.client import AsyncOpenAIClient
from toolwright.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from toolwright.llm.protocols import ChatClient, ChatResponse

__all__ = [
    "AsyncOpenAIClient",
    "ChatClient",
    "ChatResponse",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
]
