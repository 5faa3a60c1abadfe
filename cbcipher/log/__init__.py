"""
Logging Package

This package sets up the application logger: a time-rotated log file,
text or JSON records, and optional colored output on stdout.
"""

from .logger import ColorFormatter, JsonFormatter, Log

__all__ = ['ColorFormatter', 'JsonFormatter', 'Log']
