#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree Exceptions

Custom exception classes raised while building clustering trees.
"""


class ClustreeError(Exception):
    """Base exception for clustree operations"""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "CLUSTREE_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary format"""
        return {
            'error': self.error_code,
            'message': self.message,
            'details': self.details
        }


class ConfigurationError(ClustreeError):
    """Caller supplied invalid or incompatible arguments"""

    def __init__(self, message: str, config_key: str = None):
        super().__init__(message, "CONFIG_ERROR")
        self.config_key = config_key
        if config_key:
            self.details['config_key'] = config_key


class DataError(ClustreeError):
    """Input table content violates the assumptions of the builder"""

    def __init__(self, message: str, column: str = None):
        super().__init__(message, "DATA_ERROR")
        self.column = column
        if column is not None:
            self.details['column'] = str(column)
