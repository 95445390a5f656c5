"""
Logging configuration.

Configures loguru sinks with file rotation and retention policies.
"""

import sys

from loguru import logger

from affiliate.config.settings import settings


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure stderr and rotating file sinks."""
    level = level or settings.log_level
    log_file = log_file if log_file is not None else settings.log_file

    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )
