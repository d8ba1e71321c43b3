"""toolwright chat -- interactive multi-turn session."""

from __future__ import annotations

import asyncio

import click

from toolwright.cli.formatting import format_answer, format_error, get_console
from toolwright.exceptions import ToolwrightError

_EXIT_WORDS = {"exit", "quit"}


@click.command()
@click.pass_context
def chat(ctx: click.Context) -> None:
    """Chat with the model; type 'exit' or 'quit' (or send EOF) to leave.

    Every turn is appended to one conversation, so the model sees the
    whole session.
    """
    from toolwright.cli import _agent_session

    console = get_console()

    async def _chat() -> None:
        async with _agent_session(ctx.obj) as agent:
            conversation = agent.new_conversation()
            while True:
                try:
                    line = click.prompt(
                        "you", prompt_suffix="> ", default="", show_default=False
                    )
                except click.Abort:
                    break
                text = line.strip()
                if not text:
                    continue
                if text.lower() in _EXIT_WORDS:
                    break
                conversation.add_user(text)
                answer = await agent.run_conversation(conversation)
                conversation.add_assistant(answer)
                format_answer(answer, console)

    try:
        asyncio.run(_chat())
    except ToolwrightError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
