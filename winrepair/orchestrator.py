"""
Repair orchestrator — the run's state machine.

  INIT → VALIDATING → AWAITING_CONFIRMATION → RUNNING_COMPONENT_REPAIR
       → (AWAITING_CONTINUE_CONFIRMATION) → RUNNING_INTEGRITY_SCAN
       → SUMMARIZING → DONE

Skipped steps are bypassed, not entered. Nothing is retried. Fatal
conditions (not elevated, nothing to run) raise before any work starts;
everything after that is recorded on the session and reported.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from rich.console import Console

from winrepair import privilege
from winrepair.config import RepairOptions
from winrepair.errors import ConfigurationError, PrivilegeError
from winrepair.logger import SessionLogger
from winrepair.prompts import Confirm, console_confirm
from winrepair.reboot import RebootAdvisor
from winrepair.session import RepairSession
from winrepair.steps.base import RepairStep
from winrepair.steps.dism import DismRestoreHealth
from winrepair.steps.sfc import SfcScan
from winrepair.ui.header import build_plan_panel, plan_lines
from winrepair.ui.report import build_summary_panel, summary_lines


class RunState(str, Enum):
    INIT = "init"
    VALIDATING = "validating"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    RUNNING_COMPONENT_REPAIR = "running_component_repair"
    AWAITING_CONTINUE_CONFIRMATION = "awaiting_continue_confirmation"
    RUNNING_INTEGRITY_SCAN = "running_integrity_scan"
    SUMMARIZING = "summarizing"
    DONE = "done"


class RepairOrchestrator:
    """
    Drive one repair session from privilege check to reboot offer.

    Every collaborator with a side effect outside the process (elevation
    query, prompts, sleeping, the tools themselves, the reboot) can be
    injected.
    """

    def __init__(
        self,
        options: RepairOptions,
        console: Optional[Console] = None,
        confirm: Optional[Confirm] = None,
        is_elevated: Optional[Callable[[], bool]] = None,
        component_repair: Optional[RepairStep] = None,
        integrity_scan: Optional[RepairStep] = None,
        reboot_advisor: Optional[RebootAdvisor] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.options = options
        self.console = console
        if confirm is None:
            if console is None:
                raise ValueError("confirm is required when no console is given")
            confirm = console_confirm(console)
        self.confirm = confirm
        self.is_elevated = is_elevated or privilege.is_elevated
        self.component_repair = component_repair or DismRestoreHealth()
        self.integrity_scan = integrity_scan or SfcScan()
        self.reboot_advisor = reboot_advisor or RebootAdvisor(
            confirm, delay=options.reboot_delay, sleep=sleep,
        )
        self.sleep = sleep

        self.session = RepairSession(log_dir=options.log_dir)
        self.logger: Optional[SessionLogger] = None
        self.state = RunState.INIT
        self.history: list[RunState] = [RunState.INIT]

    # ── Public API ────────────────────────────────────────────────────────────

    @property
    def steps(self) -> list[RepairStep]:
        """Enabled steps, in their fixed execution order."""
        steps = []
        if not self.options.skip_dism:
            steps.append(self.component_repair)
        if not self.options.skip_sfc:
            steps.append(self.integrity_scan)
        return steps

    def run(self) -> int:
        """
        Run the session and return the process exit code.

        Raises PrivilegeError or ConfigurationError before any work is done.
        """
        if not self.is_elevated():
            raise PrivilegeError(
                "This tool must be run as Administrator.",
                hint="Right-click your terminal, choose 'Run as administrator', and try again.",
            )

        self._enter(RunState.VALIDATING)
        steps = self.steps
        if not steps:
            raise ConfigurationError(
                "Both DISM and SFC are skipped - there is nothing to do.",
                hint="Remove --skip-dism or --skip-sfc.",
            )

        logger = SessionLogger.initialize(
            self.options.log_dir, self.session.started_at, self.console,
        )
        self.logger = logger
        self.session.log_file = logger.log_file
        try:
            return self._run_steps(steps, logger)
        finally:
            logger.close()

    # ── State machine ─────────────────────────────────────────────────────────

    def _run_steps(self, steps: list[RepairStep], logger: SessionLogger) -> int:
        logger.info("Windows System Repair session started", "brand")
        for line in plan_lines(steps, self.session.log_file):
            logger.log(line, echo=False)
        if self.console is not None:
            self.console.print(build_plan_panel(steps, self.session.log_file))

        self._enter(RunState.AWAITING_CONFIRMATION)
        if not self.confirm("Do you want to proceed?"):
            logger.info("Operation cancelled by user.", "dim")
            return 0

        run_scan = not self.options.skip_sfc

        if not self.options.skip_dism:
            self._enter(RunState.RUNNING_COMPONENT_REPAIR)
            result = self.component_repair.run(self.session, logger)
            self.session.record(self.component_repair.id, result)

            if not result.outcome.succeeded and run_scan:
                self._enter(RunState.AWAITING_CONTINUE_CONFIRMATION)
                if not self.confirm(
                    f"{self.component_repair.name} did not complete cleanly. "
                    f"Continue with {self.integrity_scan.name} anyway?"
                ):
                    logger.warning(f"{self.integrity_scan.name} skipped by user.")
                    run_scan = False

        if run_scan:
            if self.session.ran(self.component_repair.id):
                self.sleep(self.options.step_pause)
            self._enter(RunState.RUNNING_INTEGRITY_SCAN)
            result = self.integrity_scan.run(self.session, logger)
            self.session.record(self.integrity_scan.id, result)

        self._summarize(steps, logger)
        return 0

    def _summarize(self, steps: list[RepairStep], logger: SessionLogger) -> None:
        self._enter(RunState.SUMMARIZING)
        self.session.finish()

        logger.section("Summary")
        for text, style in summary_lines(self.session, steps):
            logger.log(text, style, echo=False)
        if self.console is not None:
            self.console.print(build_summary_panel(self.session, steps))

        self.reboot_advisor.offer(self.session, logger)
        self._enter(RunState.DONE)

    def _enter(self, state: RunState) -> None:
        self.state = state
        self.history.append(state)
