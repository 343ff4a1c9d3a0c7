"""
Logger module - Logging configuration and utilities

Handlers are attached once to the package logger ("task_assistant") from the
environment, so every module logger created through get_logger() shares them:

    ASSISTANT_LOG_LEVEL               DEBUG / INFO / WARNING / ERROR / CRITICAL
    ASSISTANT_ENABLE_CONSOLE_LOGGING  true / false (default: false, the console
                                      front-end owns stdout)
    ASSISTANT_ENABLE_FILE_LOGGING     true / false (default: true)
    ASSISTANT_LOG_FOLDER              folder for assistant.log (default: ./logs)
    ASSISTANT_LOG_MAX_BYTES           rotation size (default: 10MB)
    ASSISTANT_LOG_BACKUP_COUNT        rotated files kept (default: 5)
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER_NAME = "task_assistant"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Flag to track if the package handlers have been attached
_logging_initialized = False


def _env_flag(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in ('true', '1', 'yes', 'on')


def setup_logging(
    log_level: Optional[str] = None,
    enable_console: Optional[bool] = None,
    enable_file: Optional[bool] = None,
    log_folder: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Attach console and rotating file handlers to the package logger.

    Arguments override the matching environment variables, which are read
    after loading the nearest .env file. Calling again without force is a
    no-op.

    Returns:
        The package logger
    """
    global _logging_initialized

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if _logging_initialized and not force:
        return package_logger
    _logging_initialized = True

    from task_assistant.config.env_config import EnvConfig

    # Values from .env count as environment variables here
    EnvConfig.load_env_file()

    level = (log_level or os.getenv("ASSISTANT_LOG_LEVEL", "INFO")).upper()
    if enable_console is None:
        enable_console = _env_flag("ASSISTANT_ENABLE_CONSOLE_LOGGING", "false")
    if enable_file is None:
        enable_file = _env_flag("ASSISTANT_ENABLE_FILE_LOGGING", "true")
    folder = log_folder or os.getenv("ASSISTANT_LOG_FOLDER", "./logs")
    max_bytes = int(os.getenv("ASSISTANT_LOG_MAX_BYTES", "10485760"))  # 10MB default
    backup_count = int(os.getenv("ASSISTANT_LOG_BACKUP_COUNT", "5"))

    package_logger.setLevel(getattr(logging, level, logging.INFO))
    package_logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if enable_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if enable_file:
        try:
            Path(folder).mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                Path(folder) / "assistant.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning(f"File logging disabled, cannot write to {folder}: {e}")

    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())

    return package_logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger that writes through the package handlers.

    Args:
        name: Logger name (typically __name__)
        level: Optional logging level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    setup_logging()

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
