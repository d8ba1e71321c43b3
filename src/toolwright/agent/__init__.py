"""Agent package -- the bounded tool-calling loop and its configuration.

Provides the Agent class and its builder, configuration and state types,
and AgentTool for calling one agent from another.
"""

from toolwright.agent.agent_tool import AgentTool
from toolwright.agent.config import DEFAULT_MAX_ITERATIONS, AgentConfig, AgentState
from toolwright.agent.loop import Agent, AgentBuilder

__all__ = [
    # Core
    "Agent",
    "AgentBuilder",
    "AgentTool",
    # Config
    "AgentConfig",
    "AgentState",
    "DEFAULT_MAX_ITERATIONS",
]
