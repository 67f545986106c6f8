"""
Tests for winrepair/steps — exit-code classification and the step runner.

Covers:
  - DISM table:  0 → success, 3010 → reboot required, anything else → warning
  - SFC table:   0 → success, non-zero → warning
  - run():       launch failure → hard failure, output streaming, arguments
  - CBS log:     status-line extraction from the tail, missing file
"""

from datetime import datetime
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from winrepair.logger import SessionLogger
from winrepair.session import RepairSession
from winrepair.steps.base import StepOutcome
from winrepair.steps.dism import DismRestoreHealth
from winrepair.steps.sfc import SfcScan, read_status_lines


# ── Helpers ───────────────────────────────────────────────────────────────────

def _console() -> tuple[Console, StringIO]:
    """Return a Console that captures output in a StringIO buffer."""
    buf = StringIO()
    con = Console(file=buf, highlight=False, no_color=True, width=160)
    return con, buf


def _session(tmp_path: Path) -> RepairSession:
    return RepairSession(
        log_dir=tmp_path,
        started_at=datetime(2026, 3, 14, 15, 9, 26),
        log_file=tmp_path / "SystemRepair_20260314_150926.log",
    )


def _proc(lines: list[str], returncode: int) -> MagicMock:
    proc = MagicMock()
    proc.stdout = iter(lines)
    proc.wait.return_value = returncode
    return proc


# ── Classification ────────────────────────────────────────────────────────────

class TestDismClassification:
    def test_zero_is_success(self):
        assert DismRestoreHealth().classify(0) is StepOutcome.SUCCESS

    def test_3010_is_reboot_required(self):
        assert DismRestoreHealth().classify(3010) is StepOutcome.SUCCESS_REBOOT_REQUIRED

    @pytest.mark.parametrize("code", [1, 2, 87, 1726, -1])
    def test_other_codes_are_warnings(self, code):
        assert DismRestoreHealth().classify(code) is StepOutcome.WARNING

    def test_3010_message_mentions_reboot(self):
        step = DismRestoreHealth()
        assert "reboot" in step.describe(step.classify(3010), 3010).lower()

    def test_87_message_mentions_warning(self):
        step = DismRestoreHealth()
        message = step.describe(step.classify(87), 87)
        assert "warning" in message.lower()
        assert "87" in message


class TestSfcClassification:
    def test_zero_is_success(self):
        assert SfcScan().classify(0) is StepOutcome.SUCCESS

    @pytest.mark.parametrize("code", [1, 2, 3])
    def test_non_zero_is_warning(self, code):
        assert SfcScan().classify(code) is StepOutcome.WARNING

    def test_exit_code_alone_never_hard_failure(self):
        assert SfcScan().classify(12345) is not StepOutcome.HARD_FAILURE
        assert DismRestoreHealth().classify(12345) is not StepOutcome.HARD_FAILURE


# ── Arguments ─────────────────────────────────────────────────────────────────

class TestArguments:
    def test_dism_command(self, tmp_path):
        argv = DismRestoreHealth().command(_session(tmp_path))
        assert argv[:4] == ["dism.exe", "/Online", "/Cleanup-Image", "/RestoreHealth"]

    def test_dism_log_path_points_into_session_dir(self, tmp_path):
        argv = DismRestoreHealth().command(_session(tmp_path))
        log_arg = argv[-1]
        assert log_arg.startswith("/LogPath:")
        log_path = Path(log_arg[len("/LogPath:"):])
        assert log_path.parent == tmp_path
        assert log_path.name == "DISM_20260314_150926.log"

    def test_dism_console_only_session_omits_log_path(self, tmp_path):
        session = RepairSession(log_dir=tmp_path / "missing", log_file=None)
        argv = DismRestoreHealth().command(session)
        assert argv == ["dism.exe", "/Online", "/Cleanup-Image", "/RestoreHealth"]
        assert not any(a.startswith("/LogPath") for a in argv)

    def test_sfc_command(self, tmp_path):
        assert SfcScan().command(_session(tmp_path)) == ["sfc.exe", "/scannow"]


# ── run() ─────────────────────────────────────────────────────────────────────

class TestRun:
    def test_success_result(self, tmp_path):
        con, buf = _console()
        with patch("subprocess.Popen", return_value=_proc(["done\n"], 0)):
            result = DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        assert result.outcome is StepOutcome.SUCCESS
        assert result.exit_code == 0
        assert "completed successfully" in buf.getvalue()

    def test_reboot_required_is_reported(self, tmp_path):
        con, buf = _console()
        with patch("subprocess.Popen", return_value=_proc([], 3010)):
            result = DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        assert result.outcome is StepOutcome.SUCCESS_REBOOT_REQUIRED
        assert "reboot" in buf.getvalue().lower()

    def test_warning_is_reported(self, tmp_path):
        con, buf = _console()
        with patch("subprocess.Popen", return_value=_proc([], 87)):
            result = DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        assert result.outcome is StepOutcome.WARNING
        assert "warning" in buf.getvalue().lower()

    def test_missing_executable_is_hard_failure(self, tmp_path):
        con, buf = _console()
        with patch("subprocess.Popen", side_effect=FileNotFoundError("dism.exe")):
            result = DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        assert result.outcome is StepOutcome.HARD_FAILURE
        assert result.exit_code is None
        assert "Could not start dism.exe" in buf.getvalue()

    def test_permission_error_is_hard_failure(self, tmp_path):
        con, _ = _console()
        with patch("subprocess.Popen", side_effect=PermissionError("denied")):
            result = SfcScan(cbs_log=tmp_path / "CBS.log").run(
                _session(tmp_path), SessionLogger(con),
            )
        assert result.outcome is StepOutcome.HARD_FAILURE

    def test_output_is_streamed_once_per_change(self, tmp_path):
        con, buf = _console()
        lines = ["Progress 10%\n", "Progress 10%\n", "Progress 20%\n", "\n"]
        with patch("subprocess.Popen", return_value=_proc(lines, 0)):
            DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        output = buf.getvalue()
        assert output.count("Progress 10%") == 1
        assert "Progress 20%" in output

    def test_no_timeout_is_passed(self, tmp_path):
        con, _ = _console()
        proc = _proc([], 0)
        with patch("subprocess.Popen", return_value=proc):
            DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        proc.wait.assert_called_once_with()

    def test_sfc_output_decoded_as_utf16(self, tmp_path):
        con, _ = _console()
        with patch("subprocess.Popen", return_value=_proc([], 0)) as mock_popen:
            SfcScan(cbs_log=tmp_path / "CBS.log").run(_session(tmp_path), SessionLogger(con))
        assert mock_popen.call_args.kwargs["encoding"] == "utf-16-le"

    def test_null_bytes_are_stripped(self, tmp_path):
        con, buf = _console()
        with patch("subprocess.Popen", return_value=_proc(["B\x00e\x00g\x00i\x00n\x00\n"], 0)):
            DismRestoreHealth().run(_session(tmp_path), SessionLogger(con))
        assert "Begin" in buf.getvalue()


# ── CBS log ───────────────────────────────────────────────────────────────────

class TestCbsLog:
    def test_missing_file_returns_empty(self, tmp_path):
        assert read_status_lines(tmp_path / "missing.log") == []

    def test_only_tail_is_searched(self, tmp_path):
        cbs = tmp_path / "CBS.log"
        lines = ["2026-03-14 Info CSI [SR] Verify complete (old)"]
        lines += [f"2026-03-14 Info CBS filler {i}" for i in range(80)]
        lines += ["2026-03-14 Info CSI [SR] Verify complete"]
        cbs.write_text("\n".join(lines), encoding="utf-8")
        assert read_status_lines(cbs) == ["2026-03-14 Info CSI [SR] Verify complete"]

    def test_percent_form_matches(self, tmp_path):
        cbs = tmp_path / "CBS.log"
        cbs.write_text("noise\nVerification 100% complete.\n", encoding="utf-8")
        assert read_status_lines(cbs) == ["Verification 100% complete."]

    def test_matches_copied_into_session_log(self, tmp_path):
        cbs = tmp_path / "CBS.log"
        cbs.write_text("[SR] Verify complete\n", encoding="utf-8")
        con, buf = _console()
        with patch("subprocess.Popen", return_value=_proc([], 0)):
            SfcScan(cbs_log=cbs).run(_session(tmp_path), SessionLogger(con))
        assert "CBS: [SR] Verify complete" in buf.getvalue()

    def test_unreadable_cbs_log_is_skipped(self, tmp_path):
        con, _ = _console()
        with patch("subprocess.Popen", return_value=_proc([], 2)):
            result = SfcScan(cbs_log=tmp_path / "nope" / "CBS.log").run(
                _session(tmp_path), SessionLogger(con),
            )
        assert result.outcome is StepOutcome.WARNING
