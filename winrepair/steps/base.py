"""
Generic repair step runner.

RepairStep — base class every external repair tool inherits from.
StepOutcome — closed classification of a tool run.
StepResult — what a run returns and the session records.

Raw exit codes are decoded once, in RepairStep.classify(), using the
subclass's exit_codes table. Everything downstream works on StepOutcome.
"""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from winrepair.logger import SessionLogger
from winrepair.session import RepairSession, format_duration


# ── Data model ────────────────────────────────────────────────────────────────

class StepOutcome(str, Enum):
    SUCCESS = "success"
    SUCCESS_REBOOT_REQUIRED = "success_reboot_required"
    WARNING = "warning"
    HARD_FAILURE = "hard_failure"

    @property
    def succeeded(self) -> bool:
        return self in (StepOutcome.SUCCESS, StepOutcome.SUCCESS_REBOOT_REQUIRED)

    @property
    def needs_reboot(self) -> bool:
        return self is StepOutcome.SUCCESS_REBOOT_REQUIRED


@dataclass(frozen=True)
class StepResult:
    step_id: str
    outcome: StepOutcome
    message: str                    # "DISM completed with warning (exit code 87)"
    exit_code: Optional[int] = None  # None when the tool never started
    duration: float = 0.0           # wall-clock seconds


# ── Base class ────────────────────────────────────────────────────────────────

class RepairStep:
    """
    One external repair executable.

    Subclasses set the class attributes and may override arguments()
    (for arguments derived from the session) and after_run() (for
    post-processing that must never affect the outcome).

    run() blocks until the tool exits. There is no timeout: both tools
    legitimately take tens of minutes.
    """

    id: str = "base_step"
    name: str = "Base Step"
    executable: str = ""
    args: tuple[str, ...] = ()
    description: str = ""
    duration_estimate: str = ""

    # Exit code → outcome; anything not listed gets default_outcome.
    exit_codes: dict[int, StepOutcome] = {0: StepOutcome.SUCCESS}
    default_outcome: StepOutcome = StepOutcome.WARNING

    # Encoding of the tool's piped console output (None = locale default).
    output_encoding: Optional[str] = None

    # ── Public API ────────────────────────────────────────────────────────────

    def arguments(self, session: RepairSession) -> list[str]:
        return list(self.args)

    def command(self, session: RepairSession) -> list[str]:
        return [self.executable, *self.arguments(session)]

    def classify(self, exit_code: int) -> StepOutcome:
        return self.exit_codes.get(exit_code, self.default_outcome)

    def describe(self, outcome: StepOutcome, exit_code: Optional[int]) -> str:
        """Human-readable result line for a classified run."""
        if outcome is StepOutcome.SUCCESS:
            return f"{self.name} completed successfully"
        if outcome is StepOutcome.SUCCESS_REBOOT_REQUIRED:
            return f"{self.name} completed successfully - a reboot is required to finish repairs"
        if outcome is StepOutcome.WARNING:
            return f"{self.name} completed with warning (exit code {exit_code})"
        return f"{self.name} could not be started"

    def run(self, session: RepairSession, logger: SessionLogger) -> StepResult:
        """Launch the tool, wait for it, classify and log the result."""
        argv = self.command(session)

        logger.section(self.name)
        if self.description:
            logger.info(self.description, "dim")
        logger.info(f"Running: {subprocess.list2cmdline(argv)}", "command")

        start = time.monotonic()
        try:
            exit_code: Optional[int] = self._launch(argv, logger)
        except OSError as e:
            logger.error(f"Could not start {self.executable}: {e}")
            exit_code = None
        duration = time.monotonic() - start

        if exit_code is None:
            outcome = StepOutcome.HARD_FAILURE
        else:
            outcome = self.classify(exit_code)

        result = StepResult(
            step_id=self.id,
            outcome=outcome,
            message=self.describe(outcome, exit_code),
            exit_code=exit_code,
            duration=duration,
        )

        if outcome.succeeded:
            logger.success(result.message)
        elif outcome is StepOutcome.WARNING:
            logger.warning(result.message)
        else:
            logger.error(result.message)
        if exit_code is not None:
            logger.info(f"{self.name} finished in {format_duration(duration)}", "dim")

        self.after_run(session, logger, result)
        return result

    def after_run(
        self, session: RepairSession, logger: SessionLogger, result: StepResult,
    ) -> None:
        """Hook for optional post-processing. Must not raise."""

    # ── Internal ──────────────────────────────────────────────────────────────

    def _launch(self, argv: list[str], logger: SessionLogger) -> int:
        """
        Run argv with output streamed to the console, return its exit code.

        Raises OSError if the executable cannot be started.
        """
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding=self.output_encoding,
            errors="replace",
            bufsize=1,
        )

        if proc.stdout is not None:
            previous = None
            for line in proc.stdout:
                stripped = line.replace("\x00", "").strip()
                # Progress lines repeat on every redraw — print each once.
                if stripped and stripped != previous:
                    logger.output(stripped)
                    previous = stripped

        return proc.wait()
