"""
Config file loading and option resolution for winrepair.

Reads ~/.config/winrepair/config.toml and merges it with CLI flags.
load_config() never raises — always returns a valid dict with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_CONFIG_PATH = Path.home() / ".config" / "winrepair" / "config.toml"

DEFAULT_LOG_DIR = Path.home() / "Desktop" / "SystemRepairLogs"
DEFAULT_REBOOT_DELAY = 10
DEFAULT_STEP_PAUSE = 2.0


def _defaults() -> dict:
    return {
        "log_path": None,
        "skip_dism": False,
        "skip_sfc": False,
        "reboot_delay": DEFAULT_REBOOT_DELAY,
        "step_pause": DEFAULT_STEP_PAUSE,
    }


def load_config(path: Path | None = None) -> dict:
    """
    Load and return winrepair config from a TOML file.

    Missing file, parse errors, or bad shapes all fall back to defaults.
    Wrongly-typed keys are ignored one by one.
    """
    config_path = path or _CONFIG_PATH
    config = _defaults()

    if not config_path.is_file():
        return config

    try:
        raw = config_path.read_bytes()
    except OSError:
        return config

    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except Exception:
        return config

    log_path = data.get("log_path")
    if isinstance(log_path, str) and log_path.strip():
        config["log_path"] = log_path

    for key in ("skip_dism", "skip_sfc"):
        if isinstance(data.get(key), bool):
            config[key] = data[key]

    delay = data.get("reboot_delay")
    if isinstance(delay, int) and not isinstance(delay, bool) and delay >= 0:
        config["reboot_delay"] = delay

    pause = data.get("step_pause")
    if isinstance(pause, (int, float)) and not isinstance(pause, bool) and pause >= 0:
        config["step_pause"] = float(pause)

    return config


# ── Resolved options ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RepairOptions:
    log_dir: Path = DEFAULT_LOG_DIR
    skip_dism: bool = False
    skip_sfc: bool = False
    reboot_delay: int = DEFAULT_REBOOT_DELAY
    step_pause: float = DEFAULT_STEP_PAUSE


def resolve_options(
    config: dict,
    log_path: Optional[str] = None,
    skip_dism: bool = False,
    skip_sfc: bool = False,
) -> RepairOptions:
    """CLI flag > config file > built-in default. Skip flags OR together."""
    chosen = log_path or config.get("log_path")
    log_dir = Path(chosen).expanduser() if chosen else DEFAULT_LOG_DIR

    return RepairOptions(
        log_dir=log_dir,
        skip_dism=skip_dism or bool(config.get("skip_dism")),
        skip_sfc=skip_sfc or bool(config.get("skip_sfc")),
        reboot_delay=config.get("reboot_delay", DEFAULT_REBOOT_DELAY),
        step_pause=config.get("step_pause", DEFAULT_STEP_PAUSE),
    )
