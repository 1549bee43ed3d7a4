"""Logging configuration for sorgen."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO
from .settings import get_settings

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the ``sorgen`` logger.

    Console records go to ``stream`` (stderr by default) so that commands
    printing data to stdout, such as the count template, stay parseable.

    Args:
        level: Logging level name; falls back to ``SORGEN_LOG_LEVEL``
        log_file: Also append records to this file; falls back to ``SORGEN_LOG_FILE``
        format_string: Record format for every handler
        stream: Console stream
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())
    log_file_path = log_file or settings.log_file
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    package_logger = logging.getLogger("sorgen")
    package_logger.setLevel(log_level)
    package_logger.handlers.clear()

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    # records stop at the package logger
    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, configuring the package logger on first use.

    Args:
        name: Module name (typically __name__)
    """
    if not logging.getLogger("sorgen").handlers:
        setup_logging()

    if name.startswith("sorgen"):
        return logging.getLogger(name)
    return logging.getLogger(f"sorgen.{name}")
