"""
Planned-operations panel.

Shown once, after validation and before the proceed prompt, so the
operator sees exactly what is about to run and where the log goes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.panel import Panel
from rich.text import Text

from winrepair.steps.base import RepairStep
from winrepair.ui.theme import APP_TAGLINE, APP_VERSION, COLOR_BRAND, COLOR_DIM, COLOR_TEXT


def plan_lines(steps: list[RepairStep], log_file: Optional[Path]) -> list[str]:
    """Plain-text version of the plan, for the session log file."""
    lines = ["Planned operations:"]
    for i, step in enumerate(steps, 1):
        lines.append(f"  {i}. {step.name} (typically {step.duration_estimate})")
    lines.append(f"Log file: {log_file if log_file else 'console only'}")
    return lines


def build_plan_panel(steps: list[RepairStep], log_file: Optional[Path]) -> Panel:
    t = Text()
    t.append("\n  The following operations will be performed:\n\n", style=f"bold {COLOR_TEXT}")

    for i, step in enumerate(steps, 1):
        t.append(f"  {i}. ", style=COLOR_DIM)
        t.append(step.name, style=f"bold {COLOR_TEXT}")
        t.append(f"  typically {step.duration_estimate}\n", style=COLOR_DIM)
        if step.description:
            t.append(f"     {step.description}\n", style=COLOR_DIM)

    t.append("\n  Log file: ", style=COLOR_DIM)
    t.append(str(log_file) if log_file else "console only", style="command")
    t.append("\n\n")
    t.append(
        "  This can take a long time. Do not close this window while a step is running.\n"
        "  A restart is recommended afterwards to complete any repairs.\n",
        style=COLOR_DIM,
    )

    return Panel(
        t,
        title=f"[bold]{APP_TAGLINE}[/bold] [dim]v{APP_VERSION}[/dim]",
        border_style=COLOR_BRAND,
    )
