"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import utilkit...' works without
an editable install, and isolates tests from a developer's environment.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from utilkit.config.settings import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop UTILKIT_* variables and the cached Settings around every test."""
    for name in ("UTILKIT_HTTP_PROXY", "UTILKIT_LOG_LEVEL", "UTILKIT_FLOAT_PRECISION"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
