"""Logging configuration for Financio.

Sets up logging to both file (with date-based naming) and console.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from config import Config

_ROOT_LOGGER_NAME = "financio"


class ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO and below, level-prefixed messages above."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno > logging.INFO:
            return f"{record.levelname} - {message}"
        return message


def get_log_file_path(config: Config, day: Optional[date] = None) -> Path:
    """Get the log file for a given day (today by default)."""
    day = day or date.today()
    return config.log_dir / f"financio-{day.isoformat()}.log"


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    file_handler = logging.FileHandler(get_log_file_path(config))
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(ConsoleFormatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional child name, e.g. "services.transactions".

    Returns:
        The financio logger, or "financio.<name>" when a name is given.
    """
    if name:
        return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(_ROOT_LOGGER_NAME)
