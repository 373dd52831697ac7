import logging
from enum import StrEnum

from sqs2http.exceptions import Sqs2HttpCLIException


class LogLevels(StrEnum):
    """A class to represent log levels."""

    critical = "critical"
    fatal = "fatal"
    error = "error"
    warning = "warning"
    warn = "warn"
    info = "info"
    debug = "debug"


LOGGING_LEVEL_MAP: dict[str, int] = {
    LogLevels.critical: logging.CRITICAL,
    LogLevels.fatal: logging.FATAL,
    LogLevels.error: logging.ERROR,
    LogLevels.warning: logging.WARNING,
    LogLevels.warn: logging.WARNING,
    LogLevels.info: logging.INFO,
    LogLevels.debug: logging.DEBUG,
}


def get_log_level(level: LogLevels | str | int) -> int:
    """Get the log level.

    Args:
        level: The log level to get. Can be an integer, a LogLevels enum value, or a string.

    Returns:
        The log level as an integer.
    """
    if isinstance(level, int):
        return level

    if isinstance(level, LogLevels):
        return LOGGING_LEVEL_MAP[level.value]

    if isinstance(level, str) and level.lower() in LOGGING_LEVEL_MAP:
        return LOGGING_LEVEL_MAP[level.lower()]

    possible_values = [member.value for member in LogLevels]
    raise Sqs2HttpCLIException(
        f"Invalid value for '--log-level', it should be one of {possible_values}"
    )
