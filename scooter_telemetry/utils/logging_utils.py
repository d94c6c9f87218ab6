"""Logging setup shared by the parser, CLI and tests."""

import logging
import sys
from pathlib import Path
from typing import Optional

from scooter_telemetry.conf.settings import settings


def setup_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str | Path] = None,
) -> logging.Logger:
    """Configure a named logger with a console handler and optional file handler.

    Args:
        name: Logger name
        log_level: Level name (defaults to settings.log_level)
        log_file: File name for a file handler (None = console only)
        log_dir: Directory for the log file (defaults to settings.logs_path)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel((log_level or settings.log_level).upper())

    formatter = logging.Formatter(settings.log_format)

    # Reconfiguring replaces earlier handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is None and settings.log_to_file:
        log_file = f"{name}.log"

    if log_file is not None:
        directory = Path(log_dir or settings.logs_path)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(directory / log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger. Handlers are attached by setup_logger on the root package."""
    return logging.getLogger(name)
