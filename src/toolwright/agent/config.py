"""Agent configuration types.

Provides AgentState and AgentConfig for configuring the agent loop.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from toolwright.exceptions import InvalidConfigurationError

DEFAULT_MAX_ITERATIONS = 10


class AgentState(str, enum.Enum):
    """States of one agent loop invocation.

    ``AWAITING_MODEL`` and ``HANDLING_TOOL_CALLS`` alternate until the
    model answers with text (``DONE``) or the run fails (``FAILED``).
    """

    AWAITING_MODEL = "awaiting_model"
    HANDLING_TOOL_CALLS = "handling_tool_calls"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AgentConfig:
    """Configuration for an agent.

    Mutable dataclass -- users may adjust settings between runs.

    Attributes:
        model: Model identifier sent with every chat request (required).
        system_prompt: Seeds each fresh conversation, when set.
        max_iterations: Maximum model calls per run before giving up.
        temperature: Sampling temperature (None = provider default).
        max_tokens: Maximum tokens per model response.
        extra_llm_kwargs: Additional payload fields (top_p, seed, etc.)
            forwarded to the chat client.
    """

    model: str | None = None
    system_prompt: str | None = None
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    temperature: float | None = None
    max_tokens: int | None = None
    extra_llm_kwargs: dict | None = None

    def validate(self) -> None:
        """Check required fields.

        Raises:
            InvalidConfigurationError: If the model is missing or
                max_iterations is not a positive integer.
        """
        if not self.model:
            raise InvalidConfigurationError("Model must be specified")
        if (
            isinstance(self.max_iterations, bool)
            or not isinstance(self.max_iterations, int)
            or self.max_iterations < 1
        ):
            raise InvalidConfigurationError(
                f"max_iterations must be a positive integer, got {self.max_iterations!r}"
            )

    def llm_kwargs(self) -> dict:
        """Keyword arguments for ``ChatClient.chat`` besides messages and tools."""
        kwargs: dict = {"model": self.model}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        if self.extra_llm_kwargs:
            kwargs.update(self.extra_llm_kwargs)
        return kwargs
