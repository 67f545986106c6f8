"""
Yes/no prompts.

The orchestrator and reboot advisor receive a Confirm callable rather
than reading stdin themselves, so tests can script the answers.
Only "y" (any case, surrounding spaces ignored) counts as yes.
"""

from __future__ import annotations

from typing import Callable

from rich.console import Console

Confirm = Callable[[str], bool]


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() == "y"


def confirm(console: Console, prompt: str) -> bool:
    """Ask a y/N question on the console. Ctrl-C or EOF counts as no."""
    try:
        answer = console.input(f"  [bold text]{prompt}[/bold text] [dim](Y/N)[/dim] ")
    except (KeyboardInterrupt, EOFError):
        console.print()
        return False
    return is_affirmative(answer)


def console_confirm(console: Console) -> Confirm:
    return lambda prompt: confirm(console, prompt)
