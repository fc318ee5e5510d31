#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree Logging Utilities - logging with colored terminal output

Usage:
    from clustree.utils.log import get_logger

    logger = get_logger(__name__)
    logger.info("Building clustering tree...")
    logger.warning("Resolution K9 has only singleton clusters")
"""

import sys
import logging

from .colors import get_color_printer


class ColoredHandler(logging.StreamHandler):
    """Logging handler that colors warnings, errors and debug output."""

    LEVEL_STYLE = {
        logging.DEBUG: "dim",
        logging.INFO: None,  # no color wrapping
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream=None):
        super().__init__(stream)
        # Without an explicit stream, follow sys.stderr as it is replaced
        self._follow_stderr = stream is None
        self.color_printer = get_color_printer()

    def emit(self, record):
        try:
            msg = self.format(record)
            style = self.LEVEL_STYLE.get(record.levelno)
            if style:
                if record.levelno == logging.WARNING:
                    msg = f"{self.color_printer.warning('⚠')} {msg}"
                elif record.levelno >= logging.ERROR:
                    msg = f"{self.color_printer.error('✗')} {msg}"
                else:
                    msg = getattr(self.color_printer, style)(msg)
            stream = sys.stderr if self._follow_stderr else self.stream
            stream.write(msg + self.terminator)
            stream.flush()
        except Exception:
            self.handleError(record)


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a clustree logger with colored output.

    Parameters
    ----------
    name : str
        Logger name (typically __name__)
    level : int
        Level set on a newly configured logger

    Returns
    -------
    logging.Logger
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = ColoredHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False  # Prevent duplicate output from root logger
    return logger


def log_header(logger, msg, char="=", width=60):
    """Log a header with separator line"""
    cp = get_color_printer()
    separator = cp.header(char * width)
    logger.info(f"\n{separator}\n{cp.header(msg)}\n{separator}")


def log_success(logger, msg, prefix="✓"):
    """Log a success message"""
    cp = get_color_printer()
    logger.info(f"{cp.success(prefix)} {msg}")
