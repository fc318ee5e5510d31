#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree Color Output Utilities - ANSI colors for terminal log output
"""

import sys
import os


class Colors:
    """ANSI color codes used by the terminal log handler"""

    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'

    BOLD = '\033[1m'
    DIM = '\033[2m'

    RESET = '\033[0m'

    @staticmethod
    def is_color_supported(stream=None):
        """
        Check if the given stream (default stdout) supports color output

        NO_COLOR disables colors, FORCE_COLOR enables them regardless of
        whether the stream is a terminal.
        """
        if os.getenv('NO_COLOR'):
            return False

        if os.getenv('FORCE_COLOR'):
            return True

        stream = stream if stream is not None else sys.stdout
        if not hasattr(stream, 'isatty'):
            return False

        return stream.isatty()


class ColorPrinter:
    """Wraps text in semantic colors when the terminal supports them"""

    def __init__(self, use_colors=None):
        if use_colors is None:
            self.use_colors = Colors.is_color_supported()
        else:
            self.use_colors = use_colors

    def _colorize(self, text, *color_codes):
        if not self.use_colors:
            return text

        color_str = ''.join(color_codes)
        return f"{color_str}{text}{Colors.RESET}"

    def success(self, text):
        return self._colorize(text, Colors.BRIGHT_GREEN, Colors.BOLD)

    def error(self, text):
        return self._colorize(text, Colors.BRIGHT_RED, Colors.BOLD)

    def warning(self, text):
        return self._colorize(text, Colors.BRIGHT_YELLOW, Colors.BOLD)

    def header(self, text):
        return self._colorize(text, Colors.BRIGHT_BLUE, Colors.BOLD)

    def dim(self, text):
        return self._colorize(text, Colors.DIM)


# Global color printer instance
_color_printer = None


def get_color_printer():
    """Get the global color printer instance"""
    global _color_printer
    if _color_printer is None:
        _color_printer = ColorPrinter()
    return _color_printer
