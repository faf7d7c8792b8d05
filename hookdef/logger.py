"""
Shared loguru logger for hookdef.

Every module logs through ``from .logger import logger``. The default loguru
sink is replaced by ``configure_logging`` at process entry points so the
runner can keep stdout free for the host protocol.
"""

import sys

from loguru import logger

LOG_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>"

__all__ = ["logger", "configure_logging"]


def configure_logging(level: str = "INFO", fmt: str = LOG_FORMAT) -> None:
    """
    Send log records at ``level`` and above to stderr.

    Args:
        level: Minimum loguru level name (DEBUG, INFO, WARNING, ...)
        fmt: loguru format string
    """
    logger.remove()
    logger.add(sys.stderr, format=fmt, level=level.upper())
