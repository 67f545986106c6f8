"""
Fatal errors raised before any repair work starts.

Everything else (tool launch failures, non-zero exits, operator
declines) is recorded on the session instead of being raised.
"""


class RepairError(Exception):
    """Base class — carries a user-facing explanation."""

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class PrivilegeError(RepairError):
    """The process is not running with administrative rights."""


class ConfigurationError(RepairError):
    """The resolved options leave nothing to run."""
