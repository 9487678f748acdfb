#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the docrender command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are attached here, to the ``docrender`` package logger, when the CLI starts.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "docrender"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_number(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(log_level: int | str, log_file: Optional[str] = None, trace_mode: bool = False) -> logging.Logger:
    """Attach console and optional file handlers to the ``docrender`` logger.

    Calling it again replaces the handlers from the previous call.

    Parameters
    ----------
    log_level : int or str
        Level number or name, e.g. ``"DEBUG"``
    log_file : str, optional
        File that receives a copy of the log output
    trace_mode : bool, default False
        Include timestamps and logger names, to follow template resolution
        step by step

    Returns
    -------
    logging.Logger
        The package logger

    """
    level = _level_number(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if file_error is not None:
        package_logger.warning(f"Could not open log file {log_file}: {file_error}")
    elif log_file:
        package_logger.debug(f"Logging to file: {log_file}")
    return package_logger
