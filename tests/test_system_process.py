"""
Tests for utilkit/system/process.py

Real subprocesses are spawned with the current Python interpreter so the
tests run on any platform; the opener is tested with subprocess mocked out.
"""

import subprocess
import sys
from unittest.mock import Mock, patch

import pytest

from utilkit.system.process import (
    OPENER_COMMANDS,
    CommandFailedError,
    CommandLaunchError,
    ProcessError,
    UnsupportedPlatformError,
    current_platform,
    open_default_app,
    run_async,
    run_capture,
)

MISSING_PROGRAM = "utilkit-no-such-program-4f1c"


@pytest.fixture
def completed_ok():
    """A successful CompletedProcess as returned by subprocess.run."""
    return subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")


def test_run_capture_returns_stdout():
    output = run_capture(sys.executable, "-c", "print('hello')")
    assert output == "hello\n"


def test_run_capture_passes_args_unmodified():
    """Arguments reach the child verbatim (no shell splitting)."""
    output = run_capture(sys.executable, "-c", "import sys; print(sys.argv[1])", "a b;c")
    assert output == "a b;c\n"


def test_run_capture_non_zero_exit_raises():
    with pytest.raises(CommandFailedError) as excinfo:
        run_capture(sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)")

    assert excinfo.value.returncode == 3
    assert "boom" in excinfo.value.stderr
    assert excinfo.value.command[0] == sys.executable


def test_run_capture_missing_program_raises_launch_error():
    with pytest.raises(CommandLaunchError) as excinfo:
        run_capture(MISSING_PROGRAM)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert isinstance(excinfo.value, ProcessError)


def test_run_async_returns_without_waiting():
    proc = run_async(sys.executable, "-c", "import time; time.sleep(0.2)")
    try:
        # Still running right after launch
        assert proc.poll() is None
    finally:
        assert proc.wait(timeout=10) == 0


def test_run_async_only_fails_on_launch():
    """A child that exits non-zero is not an error for run_async."""
    proc = run_async(sys.executable, "-c", "import sys; sys.exit(5)")
    assert proc.wait(timeout=10) == 5

    with pytest.raises(CommandLaunchError):
        run_async(MISSING_PROGRAM)


def test_opener_table_is_read_only():
    assert dict(OPENER_COMMANDS) == {"windows": "cmd", "darwin": "open", "linux": "xdg-open"}
    with pytest.raises(TypeError):
        OPENER_COMMANDS["plan9"] = "plumb"


def test_current_platform_mapping():
    with patch.object(sys, "platform", "win32"):
        assert current_platform() == "windows"
    with patch.object(sys, "platform", "linux"):
        assert current_platform() == "linux"
    with patch.object(sys, "platform", "darwin"):
        assert current_platform() == "darwin"
    with patch.object(sys, "platform", "sunos5"):
        assert current_platform() == "sunos5"


def test_open_default_app_unsupported_platform_spawns_nothing():
    """Unknown platforms fail before any process is started."""
    with patch("utilkit.system.process.subprocess.run") as mock_run, \
            patch("utilkit.system.process.subprocess.Popen") as mock_popen:
        with pytest.raises(UnsupportedPlatformError, match="plan9"):
            open_default_app("https://example.com", platform="plan9")

    mock_run.assert_not_called()
    mock_popen.assert_not_called()


@pytest.mark.parametrize("platform, expected", [
    ("linux", ["xdg-open", "https://example.com"]),
    ("darwin", ["open", "https://example.com"]),
    ("windows", ["cmd", "/c", "start", "https://example.com"]),
])
def test_open_default_app_command_shape(platform, expected, completed_ok):
    with patch("utilkit.system.process.subprocess.run", return_value=completed_ok) as mock_run:
        open_default_app("https://example.com", platform=platform)

    assert mock_run.call_args.args[0] == expected


def test_open_default_app_uses_current_platform(completed_ok):
    with patch("utilkit.system.process.current_platform", return_value="darwin"), \
            patch("utilkit.system.process.subprocess.run", return_value=completed_ok) as mock_run:
        open_default_app("/tmp/report.pdf")

    assert mock_run.call_args.args[0] == ["open", "/tmp/report.pdf"]


def test_open_default_app_opener_failure_raises():
    failed = subprocess.CompletedProcess(args=[], returncode=4, stdout="", stderr="no handler")
    with patch("utilkit.system.process.subprocess.run", return_value=failed):
        with pytest.raises(CommandFailedError) as excinfo:
            open_default_app("weird://thing", platform="linux")
    assert excinfo.value.returncode == 4


def test_open_default_app_opener_missing_raises():
    with patch("utilkit.system.process.subprocess.run", side_effect=FileNotFoundError("xdg-open")):
        with pytest.raises(CommandLaunchError):
            open_default_app("https://example.com", platform="linux")
