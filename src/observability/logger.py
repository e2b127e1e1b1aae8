"""Observability and logging utilities for the Document Retrieval client.

This module provides logging infrastructure for the application.
All modules obtain their logger through get_logger(__name__); handlers
and the level live on the root logger and are set once by
configure_logger at startup.

Design Principles:
    - Observable: Stream anomalies and request outcomes are logged
    - Single Sink: Module loggers propagate to the root handlers only
"""

import logging
import sys

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    The logger carries no handler or level of its own, so the level
    chosen in configure_logger applies to it.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Search request: top_k=10")
    """
    return logging.getLogger(name)


def configure_logger(
    level: str = "INFO",
    format: str | None = None,
    log_file: str | None = None
) -> None:
    """Configure the root logger for the application.

    Replaces any handlers previously installed on the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR); unknown names fall back to INFO
        format: Custom log format string (optional)
        log_file: Path to log file (optional, for file logging)

    Example:
        >>> configure_logger(level="DEBUG", log_file="./client.log")
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(LEVELS.get(level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(fmt=format or DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
