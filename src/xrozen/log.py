"""Logging setup for command line and TUI entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whichever entry point starts the process.
"""

import logging
import sys

LOGGER_NAME = "xrozen"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def resolve_level(level: str | int | None, default: int = logging.WARNING) -> int:
    """Map a level name ("debug", "INFO", ...) or number to a logging level."""
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    level: str | int | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Without ``handler`` a stderr stream handler is installed unless the
    logger already has handlers, so repeated calls only adjust the level.
    An explicit ``handler`` replaces whatever was installed before (the TUI
    must not write to the terminal it draws on).

    Args:
        level: Level name or number; unknown names fall back to WARNING
        handler: Handler to install instead of the stderr stream handler

    Returns:
        The configured ``xrozen`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    logger.propagate = False

    if handler is not None:
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
        logger.addHandler(handler)
    elif not logger.handlers:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream)

    return logger
