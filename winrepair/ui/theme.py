"""
Windows System Repair visual design system.

All colors, styles, and icons as named constants.
Import from here — never hardcode markup strings in other modules.

A single 24-bit palette chosen to stay readable on both the classic
conhost blue/black background and Windows Terminal's dark default.
"""

from rich.theme import Theme

from winrepair import __version__


# ── Brand ─────────────────────────────────────────────────────────────────────

APP_TAGLINE = "Windows System Repair"
APP_VERSION = __version__


# ── Color palette ─────────────────────────────────────────────────────────────

COLOR_CRITICAL = "#E05252"      # Warm severity red
COLOR_WARNING  = "#D4870A"      # Amber
COLOR_PASS     = "#4DBD74"      # Calm sage-green
COLOR_INFO     = "#5BA3C9"      # Slate blue
COLOR_BRAND    = "#7B9FD4"      # Periwinkle blue
COLOR_DIM      = "#787878"      # Medium gray
COLOR_COMMAND  = "#C0C0C0"      # Light silver — commands stand out from dim text
COLOR_TEXT     = "#F0F0F0"      # Primary text — near-white


# ── Status icons ──────────────────────────────────────────────────────────────

ICON_PASS = "✅"
ICON_WARNING = "⚠️ "
ICON_ERROR = "❌"
ICON_REBOOT = "🔄"
ICON_SKIP = "⏭️ "

# Keyed by StepOutcome.value, plus "not_run" for steps the operator aborted.
OUTCOME_ICONS: dict[str, str] = {
    "success": ICON_PASS,
    "success_reboot_required": ICON_REBOOT,
    "warning": ICON_WARNING,
    "hard_failure": ICON_ERROR,
    "not_run": ICON_SKIP,
}

OUTCOME_STYLES: dict[str, str] = {
    "success": "pass",
    "success_reboot_required": "pass",
    "warning": "warning",
    "hard_failure": "critical",
    "not_run": "dim",
}


# ── Rich Theme ────────────────────────────────────────────────────────────────

WINREPAIR_THEME = Theme(
    {
        "critical": f"{COLOR_CRITICAL} bold",
        "warning":  f"{COLOR_WARNING} bold",
        "pass":     f"{COLOR_PASS} bold",
        "info":     COLOR_INFO,
        "brand":    f"{COLOR_BRAND} bold",
        "dim":      COLOR_DIM,
        "section":  f"{COLOR_BRAND} bold",
        "command":  COLOR_COMMAND,
        "text":     COLOR_TEXT,
    }
)
