"""Test doubles shared across the suite.

Provides a scripted chat client, OpenAI-style response builders and a few
ready-made tools.  No test talks to a real API.
"""

from __future__ import annotations

import json

from toolwright.schema import INTEGER, STRING, field, optional, record
from toolwright.toolkit import tool


# ------------------------------------------------------------------
# Response builders
# ------------------------------------------------------------------


def text_response(text: str | None = "Done.") -> dict:
    """LLM response with no tool calls."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def tool_call_response(
    calls: list[tuple[str, dict | str, str]],
    text: str | None = None,
) -> dict:
    """LLM response requesting tool calls.

    Args:
        calls: List of (tool_name, arguments, call_id) tuples.  String
            arguments are sent verbatim (for malformed-JSON cases).
        text: Optional assistant text alongside the calls.
    """
    tool_calls = [
        {
            "id": cid,
            "type": "function",
            "function": {
                "name": name,
                "arguments": args if isinstance(args, str) else json.dumps(args),
            },
        }
        for name, args, cid in calls
    ]
    return {
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": text,
                    "tool_calls": tool_calls,
                },
                "finish_reason": "tool_calls",
            }
        ]
    }


class ScriptedChatClient:
    """A chat client that replays canned responses and records requests.

    Once the script runs out the last response repeats.  An exception
    instance in the script is raised instead of returned.
    """

    def __init__(self, responses: list[dict | Exception]):
        self._responses = list(responses)
        self.calls: list[dict] = []
        self.closed = False

    async def chat(self, messages, *, model=None, tools=None, **kwargs):
        self.calls.append({
            "messages": json.loads(json.dumps(messages)),
            "model": model,
            "tools": tools,
            **kwargs,
        })
        idx = min(len(self.calls) - 1, len(self._responses) - 1)
        response = self._responses[idx]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


# ------------------------------------------------------------------
# Tools
# ------------------------------------------------------------------

ADD_ARGS = record("AddArgs", field("a", INTEGER), field("b", INTEGER))

GREET_ARGS = record(
    "GreetArgs",
    field("name", STRING, "Who to greet"),
    field("title", optional(STRING)),
)


@tool(ADD_ARGS)
async def add(args):
    """Add two integers."""
    return str(args.a + args.b)


@tool(GREET_ARGS, description="Greet someone by name")
def greet(args):
    if args.title:
        return f"Hello, {args.title} {args.name}!"
    return f"Hello, {args.name}!"


@tool(record("Nothing"), name="explode")
async def explode(args):
    """Always fails."""
    raise RuntimeError("kaboom")


