"""
Logging setup and configuration utilities.

This module provides centralized logging configuration using loguru.
Library modules keep logging through the standard ``logging`` module, and
an intercept handler forwards those records to the loguru sinks.
"""

import logging
import sys
from pathlib import Path

from loguru import logger as loguru_logger

from ..config.models import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)
LOG_FILE_NAME = "botmill.log"


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: object = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage())


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup application logging with the given configuration.

    Args:
        config: Logging configuration
    """
    # Remove default handler
    loguru_logger.remove()

    # Console logging
    if config.console_enabled:
        loguru_logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=config.level,
            colorize=True,
            backtrace=True,
            diagnose=False
        )

    # File logging
    if config.file_enabled:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        loguru_logger.add(
            log_dir / LOG_FILE_NAME,
            format=FILE_FORMAT,
            level=config.level,
            rotation=config.max_file_size,
            retention=config.backup_count,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    # Route standard logging through loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
