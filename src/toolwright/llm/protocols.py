"""Chat client protocol and parsed response type.

Any object with async ``chat()`` and ``close()`` methods matching
``ChatClient`` can drive an agent; the built-in AsyncOpenAIClient is one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from toolwright.conversation import ToolCall
from toolwright.llm.errors import LLMResponseError


@runtime_checkable
class ChatClient(Protocol):
    """Protocol for pluggable chat-completion transports.

    ``chat`` receives wire-format messages and, when the agent has tools,
    a ``tools`` list in OpenAI function-calling format.  It returns the raw
    OpenAI-style response dict.  Retry, backoff and auth are the client's
    business; the agent loop never retries.
    """

    async def chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    async def close(self) -> None:
        """Release underlying resources."""
        ...


@dataclass(frozen=True)
class ChatResponse:
    """The parts of a chat completion the agent loop acts on.

    Attributes:
        content: Assistant text, or None when absent.
        tool_calls: Requested tool calls, in the order received.
        usage: Token usage dict, when the API reports one.
        finish_reason: The first choice's finish reason, if any.
    """

    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = ()
    usage: dict | None = None
    finish_reason: str | None = None

    @classmethod
    def from_openai(cls, response: dict) -> ChatResponse:
        """Parse an OpenAI-style response dict.

        Raises:
            LLMResponseError: If there is no first choice with a message, or
                its content or tool calls are not shaped as the API defines.
        """
        try:
            choice = response["choices"][0]
            message = choice["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(
                f"Cannot extract message from response: {exc!r}. "
                f"Response: {response}"
            ) from exc
        if not isinstance(message, dict):
            raise LLMResponseError(f"Response message is not an object: {message!r}")

        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise LLMResponseError(f"Response content is not a string: {content!r}")

        raw_calls = message.get("tool_calls") or []
        if not isinstance(raw_calls, list):
            raise LLMResponseError(f"Response tool_calls is not a list: {raw_calls!r}")
        for tc in raw_calls:
            if not isinstance(tc, dict) or not isinstance(tc.get("function"), dict):
                raise LLMResponseError(f"Malformed tool call in response: {tc!r}")

        return cls(
            content=content,
            tool_calls=tuple(ToolCall.from_openai(tc) for tc in raw_calls),
            usage=response.get("usage"),
            finish_reason=choice.get("finish_reason"),
        )

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)
