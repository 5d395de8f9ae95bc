"""
Logging setup.

Modules in this package log through `logging.getLogger(__name__)` and never
configure handlers themselves. Applications call setup_logging() once at
startup; the level comes from Settings.log_level (UTILKIT_LOG_LEVEL) unless
one is passed explicitly.
"""

import logging
from typing import Optional, Union

from utilkit.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Configure the root logger (stream handler + level).

    Args:
        level: Logging level (name or number). None uses Settings.log_level.

    Returns:
        The "utilkit" package logger.
    """
    if level is None:
        level = get_settings().log_level_number
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())

    # basicConfig is a no-op once handlers exist, so set the level explicitly
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return logging.getLogger("utilkit")
