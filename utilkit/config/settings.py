"""
Configuration settings for utilkit.

**Conceptual**: The helpers in this package are mostly stateless, but a few
of them need ambient configuration: which HTTP proxy an outgoing session
should use, how verbose logging should be, and which decimal precision float
comparisons default to. This module loads those values from environment
variables (optionally via a .env file) into a single frozen dataclass.

**Why an explicit settings object?**
  - Toggling HTTP_PROXY changes proxy behaviour for the whole process.
    Passing a Settings value to the code that builds an HTTP session keeps
    that decision local and testable.
  - Invalid values (a log level typo, a non-integer precision) fail at
    startup with a clear message instead of deep inside a call.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op when the file is absent)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class Settings:
    """
    Global settings for utilkit.

    **Usage pattern**:
      ```python
      from utilkit.config.settings import get_settings

      settings = get_settings()
      session = build_session(settings.http_proxy)
      ```

    Attributes:
        http_proxy: Proxy URL for outgoing HTTP sessions, or None for a direct
                    connection. Format: "http://host:port".
        log_level: Name of the root logging level (default "INFO").
        float_precision: Decimal precision used by compare_floats when the
                         caller passes precision=None (default 6).
    """
    http_proxy: Optional[str] = None
    log_level: str = "INFO"
    float_precision: int = 6

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"UTILKIT_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, "
                f"got: {self.log_level}"
            )
        if self.float_precision < 0:
            raise ValueError(
                f"float_precision must be non-negative, got: {self.float_precision}"
            )

    @property
    def log_level_number(self) -> int:
        """Numeric logging level, e.g. logging.INFO for "info"."""
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load settings from environment variables.

        **Environment variables** (all optional):
          - UTILKIT_HTTP_PROXY: Proxy URL for HTTP sessions. Empty means none.
          - UTILKIT_LOG_LEVEL: Logging level name. Defaults to "INFO".
          - UTILKIT_FLOAT_PRECISION: Integer precision for float comparison.
            Defaults to 6.

        Returns:
            Settings object with values loaded from environment.

        Raises:
            ValueError: If UTILKIT_FLOAT_PRECISION is not an integer or
                        UTILKIT_LOG_LEVEL is not a known level.
        """
        http_proxy = os.getenv("UTILKIT_HTTP_PROXY", "") or None
        log_level = os.getenv("UTILKIT_LOG_LEVEL", "INFO")
        precision_str = os.getenv("UTILKIT_FLOAT_PRECISION", "6")

        try:
            float_precision = int(precision_str)
        except ValueError:
            raise ValueError(
                f"UTILKIT_FLOAT_PRECISION must be an integer, got: {precision_str}"
            )

        return cls(
            http_proxy=http_proxy,
            log_level=log_level,
            float_precision=float_precision,
        )


# Loaded lazily on first get_settings() call. Tests inject Settings(...) directly
# or call reset_settings() after changing the environment.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global Settings singleton.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("UTILKIT_LOG_LEVEL", "DEBUG")
          reset_settings()
          assert get_settings().log_level == "DEBUG"
      ```
    """
    global _default_settings
    _default_settings = None
