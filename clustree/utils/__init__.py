#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree Utils - logging and terminal helpers
"""

from .colors import ColorPrinter, get_color_printer
from .log import get_logger, log_header, log_success

__all__ = [
    'ColorPrinter',
    'get_color_printer',
    'get_logger',
    'log_header',
    'log_success',
]
