"""
================================================================================
Autotest Tools Common Utilities
================================================================================

Shared logging setup for the command line tools.

Usage:
    from autotest_tools.common import init_logger

    init_logger()              # level from logging.level / LOGGING_LEVEL
    init_logger(level="DEBUG")

================================================================================
"""

import sys
from typing import Optional

from loguru import logger

from testsuites.api_testing.framework.config_loader import ConfigLoader


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Initializes the loguru logger for a CLI tool.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses DEFAULT_FORMAT if not provided.
        log_file: Optional file path to write logs to (logging.file).
    """
    global _logger_initialized

    if _logger_initialized:
        return

    config = ConfigLoader()
    level = (level or config.get("logging.level", "INFO")).upper()
    format_string = format_string or config.get("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(sys.stdout, format=format_string, level=level, colorize=True)

    log_file = log_file or config.get("logging.file")
    if log_file:
        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


__all__ = [
    "init_logger",
]
