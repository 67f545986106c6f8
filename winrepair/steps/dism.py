"""
Component store repair — DISM /Online /Cleanup-Image /RestoreHealth.

DISM writes its own detailed log; we point it into the session log
directory and never parse it.
"""

from pathlib import Path

from winrepair.session import RepairSession
from winrepair.steps.base import RepairStep, StepOutcome


# DISM's "operation completed, restart required" code.
ERROR_SUCCESS_REBOOT_REQUIRED = 3010


def dism_log_name(session: RepairSession) -> str:
    return f"DISM_{session.started_at:%Y%m%d_%H%M%S}.log"


class DismRestoreHealth(RepairStep):
    id = "dism"
    name = "DISM"
    executable = "dism.exe"
    args = ("/Online", "/Cleanup-Image", "/RestoreHealth")
    description = (
        "Repairing the Windows component store. SFC uses this store as "
        "its source of known-good files."
    )
    duration_estimate = "10-30 minutes"

    exit_codes = {
        0: StepOutcome.SUCCESS,
        ERROR_SUCCESS_REBOOT_REQUIRED: StepOutcome.SUCCESS_REBOOT_REQUIRED,
    }
    default_outcome = StepOutcome.WARNING

    def log_path(self, session: RepairSession) -> Path:
        return session.log_dir / dism_log_name(session)

    def arguments(self, session: RepairSession) -> list[str]:
        # Console-only session: the log directory may not exist, so let DISM
        # fall back to %WINDIR%\Logs\DISM\dism.log.
        if session.log_file is None:
            return list(self.args)
        return [*self.args, f"/LogPath:{self.log_path(session)}"]
