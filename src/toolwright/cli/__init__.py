"""Toolwright CLI -- talk to a chat model from the terminal.

This module is NEVER imported from toolwright/__init__.py.
It is only loaded via the ``toolwright`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install toolwright[cli]"
    ) from None

from toolwright.agent.config import DEFAULT_MAX_ITERATIONS

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from toolwright.agent.loop import Agent
    from toolwright.llm.protocols import ChatClient


@click.group()
@click.option(
    "--model",
    default="gpt-4o-mini",
    envvar="TOOLWRIGHT_MODEL",
    show_default=True,
    help="Model identifier sent with every request.",
)
@click.option(
    "--api-key",
    default=None,
    envvar="TOOLWRIGHT_OPENAI_API_KEY",
    help="API key for the chat-completions endpoint.",
)
@click.option(
    "--base-url",
    default=None,
    envvar="TOOLWRIGHT_OPENAI_BASE_URL",
    help="Base URL of an OpenAI-compatible API.",
)
@click.option(
    "--system",
    "system_prompt",
    default=None,
    envvar="TOOLWRIGHT_SYSTEM_PROMPT",
    help="System prompt for the agent.",
)
@click.option(
    "--max-iterations",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_ITERATIONS,
    show_default=True,
    help="Maximum model calls per answer.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log agent steps to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    model: str,
    api_key: str | None,
    base_url: str | None,
    system_prompt: str | None,
    max_iterations: int,
    verbose: bool,
) -> None:
    """Toolwright: run a tool-calling agent against a chat model."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        model=model,
        api_key=api_key,
        base_url=base_url,
        system_prompt=system_prompt,
        max_iterations=max_iterations,
    )
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def _make_client(options: dict) -> ChatClient:
    """Create the chat client for a CLI session."""
    from toolwright.llm.client import AsyncOpenAIClient

    return AsyncOpenAIClient(
        api_key=options.get("api_key"),
        base_url=options.get("base_url"),
        default_model=options["model"],
    )


@asynccontextmanager
async def _agent_session(options: dict) -> AsyncIterator[Agent]:
    """Build an agent from CLI options and close its client on exit."""
    from toolwright.agent.loop import Agent

    client = _make_client(options)
    try:
        builder = (
            Agent.builder()
            .client(client)
            .model(options["model"])
            .max_iterations(options["max_iterations"])
        )
        if options.get("system_prompt"):
            builder.system_prompt(options["system_prompt"])
        yield builder.build()
    finally:
        await client.close()


# Register subcommands after cli group is defined
from toolwright.cli.commands.ask import ask  # noqa: E402
from toolwright.cli.commands.chat import chat  # noqa: E402

cli.add_command(ask)
cli.add_command(chat)
