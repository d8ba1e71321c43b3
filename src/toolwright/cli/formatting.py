"""Rich formatting helpers for the Toolwright CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_answer(text: str, console: Console) -> None:
    """Display the agent's final answer verbatim."""
    console.print(text, markup=False, highlight=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
