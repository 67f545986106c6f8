"""
Windows System Repair — entry point.

CLI flags, config resolution, exit-code contract. The run itself lives
in orchestrator.py.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from winrepair import __version__
from winrepair.config import load_config, resolve_options
from winrepair.errors import RepairError
from winrepair.orchestrator import RepairOrchestrator
from winrepair.ui.theme import WINREPAIR_THEME


# ── Console (shared across the tool) ─────────────────────────────────────────

console = Console(theme=WINREPAIR_THEME)


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.command(name="winrepair", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="winrepair")
@click.option(
    "--log-path",
    metavar="DIR",
    default=None,
    help="Directory for session and DISM logs (default: ~/Desktop/SystemRepairLogs).",
)
@click.option("--skip-dism", is_flag=True, default=False, help="Do not run DISM /RestoreHealth.")
@click.option("--skip-sfc", is_flag=True, default=False, help="Do not run SFC /scannow.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this TOML file instead of ~/.config/winrepair/config.toml.",
)
def cli(
    log_path: Optional[str],
    skip_dism: bool,
    skip_sfc: bool,
    config_path: Optional[Path],
) -> None:
    """Repair Windows system files with DISM and SFC.

    Runs DISM /RestoreHealth to repair the component store, then
    SFC /scannow to verify and restore protected system files.
    Must be run from an elevated (Administrator) prompt.

    \b
    Exit codes:
      0   completed, or cancelled at the prompt
      1   not elevated, or both steps skipped
    """
    config = load_config(config_path)
    options = resolve_options(
        config, log_path=log_path, skip_dism=skip_dism, skip_sfc=skip_sfc,
    )

    orchestrator = RepairOrchestrator(options, console=console)
    try:
        code = orchestrator.run()
    except RepairError as e:
        console.print(f"[critical]Error:[/critical] {e.message}")
        if e.hint:
            console.print(f"[dim]{e.hint}[/dim]")
        raise SystemExit(1)

    if code:
        raise SystemExit(code)


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
