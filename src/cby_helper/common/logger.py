"""
Logging setup shared by all CBY Helper modules.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = "INFO"


def _resolve_level(level=None) -> int:
    """Turn a level name (or None) into a logging level, honoring CBY_LOG_LEVEL."""
    name = os.environ.get('CBY_LOG_LEVEL') or level or DEFAULT_LEVEL
    if isinstance(name, int):
        return name
    return getattr(logging, str(name).upper(), logging.INFO)


def setup_logger(name: str, level=None) -> logging.Logger:
    """
    Get a logger with the CBY Helper format attached.

    Handlers are only added once per logger, so calling this at import
    time from every module is safe.

    Args:
        name: Logger name, usually __name__
        level: Level name ('DEBUG', 'INFO', ...). CBY_LOG_LEVEL wins if set.

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def set_level(level) -> None:
    """Apply a level to every logger created through setup_logger."""
    resolved = _resolve_level(level)
    for name in list(logging.root.manager.loggerDict):
        if name == 'cby_helper' or name.startswith('cby_helper.'):
            logging.getLogger(name).setLevel(resolved)
