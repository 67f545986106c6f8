"""
Session logger — one interface, two sinks.

  console sink  — every record, styled through the rich Console
  file sink     — INFO and above, plain text, timestamped, append-only

Either sink may be absent: the console sink is dropped for headless use,
the file sink when the log directory cannot be created. Callers only
ever talk to SessionLogger.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text


LOGGER_NAME = "winrepair.session"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def session_log_name(started_at: datetime) -> str:
    return f"SystemRepair_{started_at:%Y%m%d_%H%M%S}.log"


# ── Handlers ──────────────────────────────────────────────────────────────────

class _ConsoleHandler(logging.Handler):
    """Print records through a rich Console using the record's style tag."""

    def __init__(self, console: Console) -> None:
        super().__init__(level=logging.DEBUG)
        self.console = console
        self.addFilter(_EchoFilter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            style = getattr(record, "style", "text")
            self.console.print(Text(record.getMessage(), style=style))
        except Exception:
            self.handleError(record)


class _EchoFilter(logging.Filter):
    """Drop records marked echo=False (already shown on screen another way)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "echo", True)


# ── Logger ────────────────────────────────────────────────────────────────────

class SessionLogger:
    """Dual-sink logger bound to one RepairSession."""

    def __init__(
        self,
        console: Optional[Console] = None,
        log_file: Optional[Path] = None,
    ) -> None:
        self.console = console
        self.log_file: Optional[Path] = None
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._detach()
        self._logger.addHandler(logging.NullHandler())

        if console is not None:
            self._logger.addHandler(_ConsoleHandler(console))
        if log_file is not None:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            handler.setLevel(logging.INFO)
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            self._logger.addHandler(handler)
            self.log_file = log_file

    @classmethod
    def initialize(
        cls,
        log_dir: Path,
        started_at: datetime,
        console: Optional[Console] = None,
    ) -> "SessionLogger":
        """
        Create the log directory and a fresh session log file.

        Never raises. On any I/O error a console-only logger is returned
        and a warning is printed.
        """
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = _claim_path(log_dir / session_log_name(started_at))
            return cls(console, log_file)
        except (OSError, ValueError) as e:
            logger = cls(console)
            logger.warning(f"Could not create log file in {log_dir}: {e}")
            logger.warning("Continuing with console output only.")
            return logger

    # ── Public API ────────────────────────────────────────────────────────────

    def log(
        self,
        message: str,
        style: str = "text",
        level: int = logging.INFO,
        echo: bool = True,
    ) -> None:
        self._logger.log(level, message, extra={"style": style, "echo": echo})

    def info(self, message: str, style: str = "text") -> None:
        self.log(message, style)

    def success(self, message: str) -> None:
        self.log(message, "pass")

    def warning(self, message: str) -> None:
        self.log(message, "warning", logging.WARNING)

    def error(self, message: str) -> None:
        self.log(message, "critical", logging.ERROR)

    def section(self, title: str) -> None:
        self.log("")
        self.log(f"=== {title} ===", "section")

    def output(self, line: str) -> None:
        """Tool output line — console only."""
        self.log(f"  {line}", "dim", logging.DEBUG)

    def close(self) -> None:
        self._detach()

    # ── Internal ──────────────────────────────────────────────────────────────

    def _detach(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()


def _claim_path(path: Path) -> Path:
    """
    Create and return path, or path with a _N suffix if that name is taken.

    Creation is exclusive, so two processes starting in the same second
    never end up with the same file.
    """
    candidate = path
    n = 1
    while True:
        try:
            with open(candidate, "x", encoding="utf-8"):
                return candidate
        except FileExistsError:
            candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
            n += 1
