"""toolwright ask -- one-shot question to the agent."""

from __future__ import annotations

import asyncio

import click

from toolwright.cli.formatting import format_answer, format_error, get_console
from toolwright.exceptions import ToolwrightError


@click.command()
@click.argument("prompt")
@click.pass_context
def ask(ctx: click.Context, prompt: str) -> None:
    """Send PROMPT to the model and print the final answer."""
    from toolwright.cli import _agent_session

    async def _ask() -> str:
        async with _agent_session(ctx.obj) as agent:
            return await agent.run(prompt)

    console = get_console()
    try:
        answer = asyncio.run(_ask())
    except ToolwrightError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
    format_answer(answer, console)
