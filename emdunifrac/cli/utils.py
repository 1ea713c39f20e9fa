"""Utility functions for the EMDUniFrac CLI."""

import logging
from pathlib import Path
from typing import Optional

from emdunifrac.logging_config import PACKAGE_LOGGER, setup_logger


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup package logging to console and, optionally, to a file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a log file to append to

    Returns:
        The configured package logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    return setup_logger(PACKAGE_LOGGER, log_file=log_file, log_level=numeric_level)


def validate_file_path(path: str, file_type: str = "file"):
    """Validate that a file path exists.

    Args:
        path: File path to validate
        file_type: Type of file for error message

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"{file_type} not found: {path}")


def validate_arguments(**kwargs):
    """Validate CLI arguments.

    Args:
        **kwargs: Arguments to validate

    Raises:
        ValueError: If validation fails
    """
    threads = kwargs.get("threads")
    if threads is not None and threads <= 0:
        raise ValueError(f"threads must be positive, got {threads}")

    chunk_size = kwargs.get("chunk_size")
    if chunk_size is not None and chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    precision = kwargs.get("precision")
    if precision is not None and precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")
