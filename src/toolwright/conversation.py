"""Conversation and message types for the agent loop.

A ``Conversation`` is an ordered, append-only message log.  It is plain
data: no I/O and no locking.  One conversation belongs to one in-flight
agent run at a time; callers sharing one across tasks must serialize
access themselves.
"""

from __future__ import annotations

import enum
import json as _json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from toolwright.exceptions import InvalidArgumentsError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Message author roles in chat-completions terms."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model.

    ``arguments`` keeps the raw JSON text exactly as the model sent it so
    the assistant message can be echoed back verbatim; parse it with
    :meth:`parse_arguments`.
    """

    id: str
    name: str
    arguments: str = "{}"
    type: str = "function"

    @classmethod
    def from_openai(cls, tc: dict) -> ToolCall:
        """Parse from OpenAI/compatible wire format.

        Some compatible servers send ``arguments`` as an object rather than
        a JSON string; it is re-encoded so ``arguments`` is always text.
        """
        function = tc.get("function") or {}
        raw_args = function.get("arguments")
        if raw_args is None:
            raw_args = "{}"
        elif not isinstance(raw_args, str):
            raw_args = _json.dumps(raw_args)
        return cls(
            id=tc.get("id") or "",
            name=function.get("name") or "",
            arguments=raw_args,
            type=tc.get("type") or "function",
        )

    def to_openai(self) -> dict:
        """Serialize to OpenAI wire format."""
        return {
            "id": self.id,
            "type": self.type,
            "function": {"name": self.name, "arguments": self.arguments},
        }

    def parse_arguments(self) -> Any:
        """Decode the raw argument text into a JSON-compatible value.

        An empty string is treated as an empty object.

        Raises:
            InvalidArgumentsError: If the text is not valid JSON.
        """
        if not self.arguments.strip():
            return {}
        try:
            return _json.loads(self.arguments)
        except (_json.JSONDecodeError, TypeError) as exc:
            raise InvalidArgumentsError(
                f"malformed JSON ({exc})", tool_name=self.name
            ) from exc


@dataclass(frozen=True)
class Message:
    """A single role-tagged entry in a conversation."""

    role: Role
    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to a chat-completions message dict.

        ``tool_calls`` is included for tool-calling assistant messages and
        ``tool_call_id`` for tool results.
        """
        d: dict = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            d["tool_calls"] = [tc.to_openai() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            d["tool_call_id"] = self.tool_call_id
        return d


class Conversation:
    """Ordered, append-only message log driving one agent run.

    Usage::

        conversation = Conversation.with_system("You are helpful")
        conversation.add_user("Hello!")
        answer = await agent.run_conversation(conversation)
        conversation.add_assistant(answer)
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = list(messages)

    @classmethod
    def with_system(cls, prompt: str) -> Conversation:
        """Create a conversation seeded with a single system message."""
        conversation = cls()
        conversation.add_system(prompt)
        return conversation

    # ------------------------------------------------------------------
    # Appending
    # ------------------------------------------------------------------

    def add_system(self, content: str) -> None:
        self._messages.append(Message(role=Role.SYSTEM, content=content))

    def add_user(self, content: str) -> None:
        self._messages.append(Message(role=Role.USER, content=content))

    def add_assistant(self, content: str) -> None:
        self._messages.append(Message(role=Role.ASSISTANT, content=content))

    def add_assistant_with_tool_calls(
        self,
        content: str | None,
        tool_calls: Iterable[ToolCall],
    ) -> None:
        """Record an assistant turn that requested tool calls.

        ``content`` may be None; many models send no text alongside calls.
        """
        self._messages.append(
            Message(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls))
        )

    def add_tool_result(self, tool_call_id: str, content: str) -> None:
        """Record a tool's text result, tied to the originating call id."""
        self._messages.append(
            Message(role=Role.TOOL, content=content, tool_call_id=tool_call_id)
        )

    def clear(self) -> None:
        """Drop every message, e.g. to start an isolated sub-conversation."""
        self._messages.clear()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the messages, oldest first."""
        return tuple(self._messages)

    def to_openai(self) -> list[dict]:
        """Convert every message to chat-completions wire format."""
        return [m.to_dict() for m in self._messages]

    def is_empty(self) -> bool:
        return not self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __repr__(self) -> str:
        return f"Conversation(messages={len(self._messages)})"
