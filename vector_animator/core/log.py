"""
Logging helpers.

Every module grabs its own logger with ``logging.getLogger(__name__)`` and
never installs handlers. Hosts without a logging setup can call
``setup_default_logging`` once at startup.
"""

import logging
from typing import Union


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_default_logging(level: Union[int, str] = "INFO") -> None:
    """
    Apply a minimal logging configuration, only once.

    Does nothing when the root logger already has handlers.

    Args:
        level: Level name ("DEBUG", "info", ...) or numeric level
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=lvl, format=LOG_FORMAT)


__all__ = ["setup_default_logging", "LOG_FORMAT"]
