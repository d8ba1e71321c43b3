"""Agent loop: model call -> tool dispatch -> model call, until an answer.

The loop suspends only while awaiting the chat client and while awaiting
each tool, one at a time in the order the model requested them.  Every
failure aborts the run immediately and propagates to the caller; nothing
is retried here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from toolwright.agent.config import AgentConfig, AgentState
from toolwright.conversation import Conversation
from toolwright.exceptions import (
    EmptyResponseError,
    MaxIterationsExceededError,
    NoToolsConfiguredError,
    ToolError,
    ToolExecutionError,
    ToolwrightError,
    UpstreamError,
)
from toolwright.llm.protocols import ChatResponse
from toolwright.toolkit.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from toolwright.agent.agent_tool import AgentTool
    from toolwright.conversation import ToolCall
    from toolwright.llm.protocols import ChatClient
    from toolwright.toolkit.models import BaseTool

logger = logging.getLogger(__name__)


class Agent:
    """An AI agent that can use tools and hold conversations.

    Each run sends the conversation and tool definitions to the model,
    executes any requested tool calls, appends their results and repeats
    until the model answers with text or ``max_iterations`` is reached.

    The agent holds no per-run state, but it is not safe to run two
    invocations over the same Conversation at once.  Wrap an agent in
    :class:`~toolwright.agent.agent_tool.AgentTool` (or hold your own lock)
    to share it between concurrent callers.

    Usage::

        agent = (
            Agent.builder()
            .model("gpt-4o-mini")
            .system_prompt("You are a helpful assistant")
            .tools([add])
            .build()
        )
        answer = await agent.run("What is 2 + 2?")
    """

    def __init__(
        self,
        config: AgentConfig,
        client: ChatClient,
        tools: ToolRegistry | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._client = client
        self._tools = tools

    @staticmethod
    def builder() -> AgentBuilder:
        return AgentBuilder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def client(self) -> ChatClient:
        return self._client

    @property
    def tools(self) -> ToolRegistry | None:
        return self._tools

    @property
    def model(self) -> str:
        return self._config.model or ""

    @property
    def system_prompt(self) -> str | None:
        return self._config.system_prompt

    @property
    def max_iterations(self) -> int:
        return self._config.max_iterations

    def new_conversation(self) -> Conversation:
        """Create a conversation seeded with this agent's system prompt."""
        if self._config.system_prompt:
            return Conversation.with_system(self._config.system_prompt)
        return Conversation()

    async def run(self, message: str) -> str:
        """Run the agent on a single user message in a fresh conversation.

        Returns:
            The model's final text answer.

        Raises:
            UpstreamError: On chat transport failure.
            EmptyResponseError: If the model sends neither text nor tool calls.
                An empty string counts as no text.
            NoToolsConfiguredError: If tool calls arrive and there are no tools.
            ToolExecutionError: If any tool call fails.
            MaxIterationsExceededError: If no answer arrives in time.
        """
        conversation = self.new_conversation()
        conversation.add_user(message)
        return await self.run_conversation(conversation)

    async def run_conversation(self, conversation: Conversation) -> str:
        """Run the agent over an existing conversation, mutating it in place.

        Assistant tool-call turns and tool results are appended as the run
        proceeds.  The final answer is returned, not appended; append it
        with ``conversation.add_assistant()`` to continue a multi-turn chat.
        """
        return await self._execute_loop(conversation)

    async def call_as_tool(self, message: str) -> str:
        """Answer ``message`` in a private conversation.

        A brand-new conversation (system prompt replicated, no shared
        history) is used and discarded, so the caller sees only the final
        text, never this agent's intermediate reasoning or tool calls.
        """
        private = self.new_conversation()
        private.add_user(message)
        logger.debug("Agent %s called as tool", self.model)
        return await self._execute_loop(private)

    def as_tool(
        self, name: str | None = None, description: str | None = None
    ) -> AgentTool:
        """Wrap this agent as a tool other agents can call.

        Args:
            name: Tool name (default: "agent_call").
            description: Tool description shown to the calling model.
        """
        from toolwright.agent.agent_tool import AgentTool

        return AgentTool(self, name=name, description=description)

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    async def _execute_loop(self, conversation: Conversation) -> str:
        max_iterations = self._config.max_iterations
        state = AgentState.AWAITING_MODEL

        try:
            for iteration in range(1, max_iterations + 1):
                logger.debug(
                    "Iteration %d/%d: %s", iteration, max_iterations, state.value
                )
                response = await self._call_model(conversation)

                if response.has_tool_calls:
                    conversation.add_assistant_with_tool_calls(
                        response.content, response.tool_calls
                    )
                    state = AgentState.HANDLING_TOOL_CALLS
                    logger.debug(
                        "Model requested %d tool call(s): %s",
                        len(response.tool_calls),
                        [tc.name for tc in response.tool_calls],
                    )
                    await self._handle_tool_calls(conversation, response.tool_calls)
                    state = AgentState.AWAITING_MODEL
                    continue

                # "" is treated like a missing answer.
                if response.content:
                    state = AgentState.DONE
                    logger.debug("Agent finished after %d iteration(s)", iteration)
                    return response.content

                raise EmptyResponseError()

            raise MaxIterationsExceededError(max_iterations)
        except ToolwrightError:
            failed_in = state
            state = AgentState.FAILED
            logger.debug("Agent failed in state %s", failed_in.value, exc_info=True)
            raise

    async def _call_model(self, conversation: Conversation) -> ChatResponse:
        """Send the conversation and current tool definitions to the model.

        Definitions are rebuilt for every request so they always reflect
        the registry.

        Raises:
            UpstreamError: If the client fails in any way.
        """
        tools = self._tools.to_openai() if self._tools else None
        try:
            raw = await self._client.chat(
                conversation.to_openai(),
                tools=tools or None,
                **self._config.llm_kwargs(),
            )
        except ToolwrightError:
            raise
        except Exception as exc:
            raise UpstreamError(f"Chat request failed: {exc}") from exc
        return ChatResponse.from_openai(raw)

    async def _handle_tool_calls(
        self,
        conversation: Conversation,
        tool_calls: tuple[ToolCall, ...],
    ) -> None:
        """Dispatch each call in order, appending one result per call.

        The first failure aborts the batch; later calls are not run.

        Raises:
            NoToolsConfiguredError: If the agent has no registry.
            ToolExecutionError: If any call fails, for whatever reason.
        """
        if self._tools is None:
            raise NoToolsConfiguredError([tc.name for tc in tool_calls])

        for tc in tool_calls:
            try:
                arguments = tc.parse_arguments()
                result = await self._tools.dispatch(tc.name, arguments)
            except ToolExecutionError:
                raise
            except ToolError as exc:
                raise ToolExecutionError(tc.name, exc) from exc
            conversation.add_tool_result(tc.id, result)


class AgentBuilder:
    """Fluent builder for agents.

    Usage::

        agent = (
            Agent.builder()
            .model("gpt-4o-mini")
            .system_prompt("You are a helpful coding assistant")
            .max_iterations(15)
            .build()
        )
    """

    def __init__(self) -> None:
        self._client: ChatClient | None = None
        self._model: str | None = None
        self._system_prompt: str | None = None
        self._tools: ToolRegistry | None = None
        self._max_iterations: int | None = None
        self._temperature: float | None = None
        self._max_tokens: int | None = None

    def client(self, client: ChatClient) -> AgentBuilder:
        """Set the chat client. Defaults to AsyncOpenAIClient from env config."""
        self._client = client
        return self

    def model(self, model: str) -> AgentBuilder:
        self._model = model
        return self

    def system_prompt(self, prompt: str) -> AgentBuilder:
        self._system_prompt = prompt
        return self

    def tools(self, tools: ToolRegistry | Iterable[BaseTool]) -> AgentBuilder:
        """Set the tools, as a registry or an iterable of tools.

        Raises:
            DuplicateToolError: If the iterable repeats a tool name.
        """
        if not isinstance(tools, ToolRegistry):
            tools = ToolRegistry(tools)
        self._tools = tools
        return self

    def max_iterations(self, max_iterations: int) -> AgentBuilder:
        """Set the iteration cap (default 10)."""
        self._max_iterations = max_iterations
        return self

    def temperature(self, temperature: float) -> AgentBuilder:
        self._temperature = temperature
        return self

    def max_tokens(self, max_tokens: int) -> AgentBuilder:
        self._max_tokens = max_tokens
        return self

    def build(self) -> Agent:
        """Build the agent.

        Raises:
            InvalidConfigurationError: If the model is missing or the
                iteration cap is invalid; LLMConfigError (a subclass) if the
                default client cannot find an API key.
        """
        config = AgentConfig(
            model=self._model,
            system_prompt=self._system_prompt,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if self._max_iterations is not None:
            config.max_iterations = self._max_iterations
        config.validate()

        client = self._client
        if client is None:
            from toolwright.llm.client import AsyncOpenAIClient

            client = AsyncOpenAIClient(default_model=config.model or "")
        return Agent(config, client, self._tools)
