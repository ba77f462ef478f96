#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/logging_utils.py
"""Logging setup for the mdattrs command line entry point.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are installed here, once, by the CLI. The requested level applies to the
``mdattrs`` logger tree. Other libraries (mistune, rich) stay at WARNING
unless trace mode is on, so ``--log-level DEBUG`` shows extractor and
resolver decisions without third-party noise.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "mdattrs"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value.

    Unknown names fall back to WARNING.
    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def _make_formatter(trace_mode: bool) -> logging.Formatter:
    if trace_mode:
        return logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    return logging.Formatter(_PLAIN_FORMAT)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optionally file) handlers for a CLI run.

    Parameters
    ----------
    log_level : int | str
        Level for mdattrs messages, numeric or by name
    log_file : str, optional
        File that receives a copy of every record the console gets
    trace_mode : bool, default False
        Timestamp records, name the emitting module, and let third-party
        loggers through at the same level

    Returns
    -------
    logging.Logger
        The ``mdattrs`` package logger

    """
    level = resolve_log_level(log_level)
    formatter = _make_formatter(trace_mode)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level if trace_mode else max(level, logging.WARNING))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    if file_error is not None:
        package_logger.warning("Could not open log file %s: %s", log_file, file_error)
    elif log_file:
        package_logger.debug("Logging to file: %s", log_file)

    return package_logger
