"""Logging configuration for EMDUniFrac.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers themselves. Entry points call ``setup_logger`` on the package logger
to route every ``emdunifrac.*`` record to the console and, optionally, a file.
"""

import logging
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "emdunifrac"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    log_file: Optional[Union[str, Path]] = None,
    log_level: int = logging.INFO,
    log_to_console: bool = True,
) -> logging.Logger:
    """Set up a logger with console and optional file handlers.

    Args:
        name: Logger name (default: the package logger)
        log_file: Path of a log file to append to. Parent directories are
                  created. If None, no file handler is attached.
        log_level: Logging level (default: logging.INFO)
        log_to_console: Whether to log to stderr (default: True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Replace handlers from an earlier setup, closing any open log files
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def sanitize_path(path: Optional[Union[str, Path]]) -> str:
    """Render a file path for log messages ("None" if path is None)."""
    if path is None:
        return "None"
    return str(path)
