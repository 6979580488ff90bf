"""
Logging setup for the mirror.

Library modules only create loggers under the ``mirrordb`` namespace;
applications call ``configure_logging`` once if they want output.
"""
import logging
from typing import Optional

from mirrordb.config import get_settings

LOGGER_NAME = "mirrordb"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stream handler to the ``mirrordb`` logger.

    Args:
        level: Level name; defaults to ``settings.log_level``

    Returns:
        The configured package logger
    """
    level_name = (level or get_settings().log_level).upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name))

    if not any(getattr(h, "_mirrordb", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._mirrordb = True
        logger.addHandler(handler)

    return logger
