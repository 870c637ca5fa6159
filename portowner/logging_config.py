"""Centralized logging configuration for portowner."""

import logging
import logging.handlers

from portowner.utils import get_log_dir


def setup_logging(level: str = "WARNING", log_to_console: bool = True,
                  log_to_file: bool = False, max_file_size_mb: int = 10,
                  backup_count: int = 5):
    """
    Configure logging for all components.

    The report owns stdout, so every handler here writes to stderr or a file.

    Args:
        level: Root log level name (e.g. "DEBUG", "WARNING")
        log_to_console: Log to stderr
        log_to_file: Also log to a rotating file under ~/.portowner/logs
        max_file_size_mb: Rotation size for the log file
        backup_count: Rotated files to keep

    Returns:
        Root logger instance
    """
    log_level = getattr(logging, str(level).upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers
    root_logger.handlers.clear()

    if log_to_file:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "portowner.log",
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count
        )
        file_handler.setLevel(log_level)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    if log_to_console:
        # StreamHandler defaults to stderr
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    return root_logger
