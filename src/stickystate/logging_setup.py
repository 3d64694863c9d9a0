"""Logging configuration for the stickystate CLI."""

from __future__ import annotations

import logging
import os


def setup_logging(
    logger_name: str = "stickystate",
    log_file: str | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure console logging plus an optional file handler.

    Args:
        logger_name: Logger to configure; its children share the handlers
        log_file: Path to log file (None for no file logging)
        verbose: Enable DEBUG level on console (default WARNING)

    Returns:
        Configured logger instance
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter("%(levelname)-8s | %(name)s | %(message)s")
    )

    file_handler = None
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    # Re-running in one process (tests, REPL) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(console_handler)
    if file_handler:
        logger.addHandler(file_handler)

    return logger
