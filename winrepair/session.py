"""
RepairSession — state for one end-to-end run.

One instance is created per process and handed to every component
(steps, report, reboot advisor) instead of living in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from winrepair.steps.base import StepResult


class StepState(str, Enum):
    NOT_RUN = "not_run"
    OK = "ok"
    FAILED = "failed"


@dataclass
class RepairSession:
    log_dir: Path
    started_at: datetime = field(default_factory=datetime.now)
    log_file: Optional[Path] = None
    ended_at: Optional[datetime] = None
    results: dict[str, "StepResult"] = field(default_factory=dict)

    # ── Step outcomes ─────────────────────────────────────────────────────────

    def record(self, step_id: str, result: "StepResult") -> None:
        """
        Store a step's result.

        Outcomes only move forward: a step that already has a result
        cannot be recorded again.
        """
        if step_id in self.results:
            raise ValueError(f"step {step_id!r} already recorded")
        self.results[step_id] = result

    def state(self, step_id: str) -> StepState:
        result = self.results.get(step_id)
        if result is None:
            return StepState.NOT_RUN
        return StepState.OK if result.outcome.succeeded else StepState.FAILED

    def ran(self, step_id: str) -> bool:
        return step_id in self.results

    @property
    def any_succeeded(self) -> bool:
        return any(r.outcome.succeeded for r in self.results.values())

    @property
    def reboot_required(self) -> bool:
        return any(r.outcome.needs_reboot for r in self.results.values())

    # ── Timing ────────────────────────────────────────────────────────────────

    def finish(self, when: Optional[datetime] = None) -> None:
        if self.ended_at is None:
            self.ended_at = when or datetime.now()

    @property
    def elapsed(self) -> timedelta:
        end = self.ended_at or datetime.now()
        return end - self.started_at


def format_duration(delta: timedelta | float) -> str:
    """Render a duration as '1h 2m 3s' (hours always shown)."""
    seconds = delta.total_seconds() if isinstance(delta, timedelta) else delta
    total = max(0, int(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours}h {minutes}m {secs}s"
