import logging
import os
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from promport.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class LocalTimeFormatter(logging.Formatter):
    """Timestamps in the host's local time, with the UTC offset."""

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created).astimezone()
        return dt.strftime(datefmt or "%Y-%m-%d %H:%M:%S %z")


def setup_logger(
    logger_name: str,
    log_level: str = "info",
    log_to_file: bool = False,
    log_dir: Optional[str] = None,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure ``logger_name`` to write to stdout and, with ``log_to_file``,
    to ``<log_dir>/<logger_name>.log`` rotated at midnight.
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    formatter = LocalTimeFormatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or settings.LOG_DIR
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            os.path.join(log_dir, f"{logger_name}.log"),
            when="midnight",
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, configuring it from settings on first use."""
    existing = logging.getLogger(name)
    if existing.handlers:
        return existing
    return setup_logger(
        name,
        log_level=settings.LOG_LEVEL,
        log_to_file=settings.LOG_TO_FILE,
    )
