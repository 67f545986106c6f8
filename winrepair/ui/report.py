"""
End-of-session summary.

summary_lines() is the single source of the summary content: the
console panel and the log file are both built from it.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from winrepair.session import RepairSession, format_duration
from winrepair.steps.base import RepairStep, StepResult
from winrepair.ui.theme import OUTCOME_ICONS, OUTCOME_STYLES


NOT_RUN_LABEL = "Not run"


def step_status(result: StepResult | None) -> tuple[str, str]:
    """Return (status text, outcome key) for a step's summary line."""
    if result is None:
        return NOT_RUN_LABEL, "not_run"
    return result.message, result.outcome.value


def summary_lines(session: RepairSession, steps: list[RepairStep]) -> list[tuple[str, str]]:
    """
    Return (text, style) pairs describing the session.

    Only steps enabled for this run are listed; a step that was enabled
    but never started (operator aborted) shows as "Not run".
    """
    lines: list[tuple[str, str]] = []
    for step in steps:
        status, key = step_status(session.results.get(step.id))
        lines.append((f"{step.name}: {status}", OUTCOME_STYLES[key]))

    lines.append((f"Total duration: {format_duration(session.elapsed)}", "text"))
    if session.log_file is not None:
        lines.append((f"Log file: {session.log_file}", "dim"))
    if session.reboot_required:
        lines.append(("A reboot is required to complete the repairs.", "warning"))
    return lines


def build_summary_panel(session: RepairSession, steps: list[RepairStep]) -> Panel:
    results = [session.results.get(s.id) for s in steps]

    t = Text()
    for step, result in zip(steps, results):
        status, key = step_status(result)
        t.append(f"  {OUTCOME_ICONS[key]}  ", style="bold")
        t.append(f"{step.name:<6}", style="bold text")
        t.append(f"  {status}\n", style=OUTCOME_STYLES[key])

    t.append(f"\n  Total duration: {format_duration(session.elapsed)}\n", style="text")
    if session.log_file is not None:
        t.append(f"  Log file: {session.log_file}\n", style="dim")
    if session.reboot_required:
        t.append("\n  A reboot is required to complete the repairs.\n", style="warning")

    # Panel border follows worst outcome
    outcomes = [r.outcome.value for r in results if r is not None]
    border = (
        "bright_red" if "hard_failure" in outcomes
        else "yellow" if "warning" in outcomes or len(outcomes) < len(steps)
        else "bright_green"
    )

    return Panel(t, title="[bold]Summary[/bold]", border_style=border, padding=(1, 2))
