"""loguru sink setup."""

import sys

from loguru import logger

from core.config import LOG_FILE, LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    """Replace loguru's default sink with stderr and an optional log file."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level)
    logger.debug(f"Logging configured (level={level}, file={log_file or '-'})")
