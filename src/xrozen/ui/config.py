"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

import logging


class LogLevel:
    """Log level constants for the log panel.

    Values match the standard ``logging`` levels so records can be
    compared directly: DEBUG < INFO < WARNING < ERROR.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)

    @classmethod
    def clamp(cls, level: int) -> int:
        """Map any numeric logging level onto one of the four panel levels."""
        if level >= cls.ERROR:
            return cls.ERROR
        if level >= cls.WARNING:
            return cls.WARNING
        if level >= cls.INFO:
            return cls.INFO
        return cls.DEBUG


# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Conversation sidebar
SIDEBAR_TITLE_MAX_LENGTH = 28  # Characters before truncating titles
SIDEBAR_DATE_FORMAT = "%b %d, %H:%M"

# Chat display configuration
MESSAGE_TIME_FORMAT = "%H:%M"
THINKING_TEXT = "XrozenAI is thinking..."

# Toast durations (seconds)
NOTIFY_TIMEOUT = 4
NOTIFY_ERROR_TIMEOUT = 6
