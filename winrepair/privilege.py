"""
Privilege gate.

Both DISM and SFC refuse to run without an elevated token, so the
orchestrator asks this once, before touching the filesystem.
"""

import ctypes
import os


def is_elevated() -> bool:
    """
    Return True if the current process has administrative rights.

    Fails closed: any platform other than Windows, or any error from the
    shell32 query, reports not-elevated.
    """
    if os.name != "nt":
        return False
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except Exception:
        return False
