"""Standardized logging setup for the chat relay."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def setup_logger(
    name: str,
    log_dir: Path,
    log_filename: str,
    level: int | str = logging.INFO,
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
    console: bool = True,
) -> logging.Logger:
    """Create a logger with console + rotating file handlers.

    Args:
        name: Logger name (e.g. "chat_relay")
        log_dir: Directory for log files (created if not exists)
        log_filename: Log file name (e.g. "chat.log")
        level: Logging level, as int or name ("DEBUG", "INFO", ...)
        max_bytes: Max size per log file before rotation
        backup_count: Number of backup files to keep
        console: Attach a stderr handler (off for the TUI, which owns the terminal)

    Returns:
        Configured logger instance
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        file_handler = RotatingFileHandler(
            log_dir / log_filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
