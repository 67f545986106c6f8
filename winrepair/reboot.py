"""
Reboot advisor.

Offered only when at least one step succeeded. An affirmative answer
starts a short countdown the operator can cancel with Ctrl-C, after
which a forced restart is requested from Windows.
"""

from __future__ import annotations

import subprocess
import time
from typing import Callable

from winrepair.logger import SessionLogger
from winrepair.prompts import Confirm
from winrepair.session import RepairSession

SHUTDOWN_COMMAND = ["shutdown.exe", "/r", "/f", "/t", "0"]


class RebootAdvisor:
    def __init__(
        self,
        confirm: Confirm,
        delay: int = 10,
        sleep: Callable[[float], None] = time.sleep,
        runner: Callable[..., object] = subprocess.run,
    ) -> None:
        self.confirm = confirm
        self.delay = delay
        self.sleep = sleep
        self.runner = runner

    def offer(self, session: RepairSession, logger: SessionLogger) -> bool:
        """
        Ask whether to restart now. Returns True if a restart was requested.
        """
        if not session.any_succeeded:
            return False

        if not self.confirm("Would you like to restart the computer now?"):
            logger.info("Restart skipped. Please restart the computer at your convenience.", "dim")
            return False

        logger.warning(f"Restarting in {self.delay} seconds. Press Ctrl-C to cancel.")
        try:
            for remaining in range(self.delay, 0, -1):
                logger.info(f"  {remaining}...", "dim")
                self.sleep(1)
        except KeyboardInterrupt:
            logger.info("Restart cancelled.", "dim")
            return False

        logger.info("Restarting now.", "section")
        try:
            self.runner(SHUTDOWN_COMMAND, check=False)
        except OSError as e:
            logger.error(f"Could not request restart: {e}")
            return False
        return True
