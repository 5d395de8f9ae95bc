"""
Subprocess helpers and the platform's default-application opener.

**Conceptual**: Thin wrappers around subprocess that turn the two ways a
command can go wrong into typed exceptions:
  - the program could not be started at all (missing binary, permissions)
    -> CommandLaunchError
  - the program ran and exited non-zero -> CommandFailedError

None of these helpers apply a timeout: run_capture and open_default_app
block until the child exits.

**Default application**: open_default_app hands a URI (URL or file path) to
the platform's opener program:

    windows -> cmd /c start <uri>
    darwin  -> open <uri>
    linux   -> xdg-open <uri>

Any other platform raises UnsupportedPlatformError before anything is spawned.
"""

import logging
import subprocess
import sys
from types import MappingProxyType
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

OPENER_COMMANDS = MappingProxyType({
    "windows": "cmd",
    "darwin": "open",
    "linux": "xdg-open",
})


class ProcessError(Exception):
    """Base exception for subprocess helpers."""
    pass


class UnsupportedPlatformError(ProcessError):
    """Raised when there is no known opener program for the platform."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"don't know how to open things on {platform} platform")


class CommandLaunchError(ProcessError):
    """
    Raised when a program cannot be started.

    The underlying OSError (e.g. FileNotFoundError) is chained as __cause__.
    """

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        super().__init__(f"failed to start {self.command[0]!r}: {reason}")


class CommandFailedError(ProcessError):
    """
    Raised when a program exits with a non-zero status.

    Attributes:
        command: argv that was run.
        returncode: Exit status reported by the child.
        stderr: Whatever the child wrote to standard error.
    """

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{self.command[0]!r} exited with status {returncode}")


def current_platform() -> str:
    """
    Platform identifier used as the key into OPENER_COMMANDS.

    Maps sys.platform "win32"/"cygwin" to "windows" and "linux*" to "linux";
    other values ("darwin", "freebsd13", ...) are returned unchanged.
    """
    if sys.platform.startswith(("win", "cygwin")):
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def _run(command: List[str]) -> str:
    logger.debug("Running %s", command)
    try:
        completed = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise CommandLaunchError(command, str(e)) from e

    if completed.returncode != 0:
        logger.debug("%s exited with status %d", command[0], completed.returncode)
        raise CommandFailedError(command, completed.returncode, completed.stderr)

    return completed.stdout


def run_capture(program: str, *args: str) -> str:
    """
    Run a program to completion and return its standard output.

    Args:
        program: Executable name (looked up on PATH) or path.
        *args: Arguments passed to the program, unmodified (no shell).

    Returns:
        Standard output as text.

    Raises:
        CommandLaunchError: If the program cannot be started.
        CommandFailedError: If it exits with a non-zero status.

    Example:
        >>> run_capture("echo", "hello")
        'hello\\n'
    """
    return _run([program, *args])


def run_async(program: str, *args: str) -> subprocess.Popen:
    """
    Start a program and return immediately without waiting for it.

    The child's stdin/stdout/stderr are connected to the null device.

    Returns:
        The Popen handle (callers may wait() on it, or ignore it).

    Raises:
        CommandLaunchError: If the program cannot be started.
    """
    command = [program, *args]
    logger.debug("Starting %s", command)
    try:
        return subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise CommandLaunchError(command, str(e)) from e


def open_default_app(uri: str, platform: Optional[str] = None) -> None:
    """
    Open uri with the platform's default application and wait for the opener.

    Args:
        uri: URL or file path to open.
        platform: Platform identifier; defaults to current_platform().

    Raises:
        UnsupportedPlatformError: If platform has no entry in OPENER_COMMANDS.
        CommandLaunchError: If the opener cannot be started.
        CommandFailedError: If the opener exits with a non-zero status.
    """
    platform = platform or current_platform()
    opener = OPENER_COMMANDS.get(platform)
    if opener is None:
        raise UnsupportedPlatformError(platform)

    if platform == "windows":
        command = [opener, "/c", "start", uri]
    else:
        command = [opener, uri]

    _run(command)
