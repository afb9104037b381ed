"""Centralized logging configuration using loguru.

Every recoverable condition in the item service (skipped rows, duplicate ids,
unknown columns, refused writes, remote failures) is reported through loguru
rather than raised, so the configured sinks are the only place those reports
surface.

Example:
    from imladris.logging import setup_logging

    setup_logging(level="DEBUG")

    from loguru import logger
    logger.info("Service started")

"""

import logging
import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers that are noisy at INFO (one line per HTTP request)
NOISY_LOGGERS = ("httpx", "httpcore", "google.auth")


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru for the application.

    Should be called once at process startup (the CLI does this in its callback).

    Args:
        level: Minimum log level to capture. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: If True, emit one JSON object per record on stderr.
        log_file: Optional file path to also write logs to, rotated at 10 MB.

    Returns:
        The configured loguru logger instance.

    """
    logger.remove()

    if json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=CONSOLE_FORMAT,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
        )

    # Request-level chatter is only useful when debugging the store adapters
    http_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger
