"""Centralized logging configuration for the resource portal."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for the application.

    Sets up console logging and, when ``log_file`` is given, a rotating file
    handler keeping at most 4 previous files. Only configures if the root
    logger has no handlers yet, so repeated calls (tests, reloads) do not
    duplicate output.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
        log_file: Optional path of the log file

    Returns:
        Logger instance for the calling module
    """
    root_logger = logging.getLogger()

    if root_logger.handlers:
        return logging.getLogger(__name__)

    formatter = logging.Formatter(LOG_FORMAT)
    log_level = getattr(logging, level.upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            mode="a",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=4,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)

    return logging.getLogger(__name__)
