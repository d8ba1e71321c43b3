"""Expose an agent as a tool for multi-agent setups.

The calling agent only sees the final answer: each call runs the wrapped
agent in a private conversation via ``Agent.call_as_tool``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from toolwright.schema.types import STRING, Field, Record
from toolwright.toolkit.models import BaseTool

if TYPE_CHECKING:
    from toolwright.agent.loop import Agent

logger = logging.getLogger(__name__)

AGENT_CALL_ARGS = Record(
    "AgentCallArgs",
    (Field("message", STRING, "The message to send to the agent."),),
)


class AgentTool(BaseTool):
    """Wrapper that lets one agent delegate work to another.

    Calls are serialized by an ``asyncio.Lock``: the wrapped agent may be
    requested by several outer agents at once, and each call holds the
    lease for its whole private run.

    Usage::

        analyst_tool = AgentTool(
            analyst,
            name="analyst",
            description="Ask the analyst agent to analyze data",
        )
        lead = Agent.builder().model("gpt-4o").tools([analyst_tool]).build()
    """

    argument_type = AGENT_CALL_ARGS

    def __init__(
        self,
        agent: Agent,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> None:
        self.agent = agent
        self.name = name or "agent_call"
        self.description = description or "Call another agent"
        self._lease = asyncio.Lock()

    async def invoke(self, args: Any) -> str:
        async with self._lease:
            logger.debug("Tool %s delegating to agent", self.name)
            return await self.agent.call_as_tool(args.message)

    async def call_agent(self, message: str) -> str:
        """Call the wrapped agent directly, outside any registry."""
        return await self.invoke(self.decode({"message": message}))
