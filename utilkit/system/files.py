"""
Small file helpers.

**Two flavours**:
  - Legacy helpers (read_file, write_file, append_file) never raise. A failed
    read returns "" and a failed write is dropped. Failures are logged at
    DEBUG so they can still be traced.
  - Strict helpers (read_bytes, read_text, write_text, append_text) raise
    OSError and should be preferred in new code.

Files are created with mode 0644 (rw-r--r--, further restricted by umask)
and text is stored as UTF-8 bytes without newline translation.

read_file never loses content: bytes that are not UTF-8 (a GBK export, a
binary blob) come back as surrogate escapes, and write_file/append_file turn
them back into the same bytes. To convert a legacy-encoded file, pass
read_bytes(path) to utilkit.text.encoding.gbk_to_utf8 or convert_encoding.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

FILE_MODE = 0o644

# Lone surrogates from read_file map back to the original raw bytes
_ERRORS = "surrogateescape"


def _write_bytes(path: PathLike, data: bytes, flags: int) -> None:
    fd = os.open(path, flags, FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


# ---------------------------------------------------------------------------
# Strict helpers
# ---------------------------------------------------------------------------

def read_bytes(path: PathLike) -> bytes:
    """Read a whole file as raw bytes. Raises OSError on failure."""
    return Path(path).read_bytes()


def read_text(path: PathLike) -> str:
    """
    Read a whole file as UTF-8 text.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the content is not valid UTF-8.
    """
    return read_bytes(path).decode("utf-8")


def write_text(path: PathLike, text: str) -> None:
    """Create or truncate path and write text. Raises OSError on failure."""
    _write_bytes(path, text.encode("utf-8", _ERRORS), os.O_WRONLY | os.O_CREAT | os.O_TRUNC)


def append_text(path: PathLike, text: str) -> None:
    """Append text to path, creating it if absent. Raises OSError on failure."""
    _write_bytes(path, text.encode("utf-8", _ERRORS), os.O_WRONLY | os.O_CREAT | os.O_APPEND)


# ---------------------------------------------------------------------------
# Legacy helpers (errors swallowed)
# ---------------------------------------------------------------------------

def read_file(path: PathLike) -> str:
    """
    Read a whole file as text, returning "" if it cannot be read.

    Content is never discarded: non-UTF-8 bytes are kept as surrogate escapes
    (recover them with text.encode("utf-8", "surrogateescape")).
    """
    try:
        return read_bytes(path).decode("utf-8", _ERRORS)
    except OSError as e:
        logger.debug("read_file(%s) failed: %s", path, e)
        return ""


def write_file(path: PathLike, text: str) -> None:
    """Truncate-and-write path; errors are ignored."""
    try:
        write_text(path, text)
    except OSError as e:
        logger.debug("write_file(%s) failed: %s", path, e)


def append_file(path: PathLike, text: str) -> None:
    """Append to path (creating it if absent); errors are ignored."""
    try:
        append_text(path, text)
    except OSError as e:
        logger.debug("append_file(%s) failed: %s", path, e)


def exists(path: PathLike) -> bool:
    """True if path names an existing file or directory."""
    return os.path.exists(path)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------

def get_work_directory() -> str:
    """Current working directory, with forward slashes."""
    return os.getcwd().replace("\\", "/")


def get_executable_directory() -> str:
    """Absolute directory of the running program (sys.argv[0]), with forward slashes."""
    return os.path.abspath(os.path.dirname(sys.argv[0])).replace("\\", "/")
