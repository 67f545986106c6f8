"""
System file integrity scan — SFC /scannow.

SFC reports its findings in the CBS log rather than through its exit
code, so after the run the tail of that log is searched for the
verification status line and any match is copied into the session log.
Reading the CBS log is best-effort: it may be absent or locked.
"""

from __future__ import annotations

import os
import re
from collections import deque
from pathlib import Path
from typing import Optional

from winrepair.logger import SessionLogger
from winrepair.session import RepairSession
from winrepair.steps.base import RepairStep, StepOutcome, StepResult


CBS_TAIL_LINES = 50
VERIFY_PATTERN = re.compile(r"verif\w*\s+(\d+%\s+)?complete", re.IGNORECASE)


def default_cbs_log() -> Path:
    system_root = os.environ.get("SystemRoot", r"C:\Windows")
    return Path(system_root) / "Logs" / "CBS" / "CBS.log"


class SfcScan(RepairStep):
    id = "sfc"
    name = "SFC"
    executable = "sfc.exe"
    args = ("/scannow",)
    description = (
        "Verifying protected system files and replacing any that do not "
        "match their known-good versions."
    )
    duration_estimate = "5-20 minutes"

    exit_codes = {0: StepOutcome.SUCCESS}
    default_outcome = StepOutcome.WARNING

    # sfc.exe writes UTF-16LE when its output is piped.
    output_encoding = "utf-16-le"

    def __init__(self, cbs_log: Optional[Path] = None) -> None:
        self.cbs_log = cbs_log or default_cbs_log()

    def after_run(
        self, session: RepairSession, logger: SessionLogger, result: StepResult,
    ) -> None:
        if result.exit_code is None:
            return
        for line in read_status_lines(self.cbs_log):
            logger.info(f"CBS: {line}", "info")


def read_status_lines(path: Path, tail: int = CBS_TAIL_LINES) -> list[str]:
    """
    Return verification status lines from the last `tail` lines of path.

    Returns [] if the file is missing or unreadable.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            lines = deque(f, maxlen=tail)
    except OSError:
        return []

    return [line.strip() for line in lines if VERIFY_PATTERN.search(line)]
