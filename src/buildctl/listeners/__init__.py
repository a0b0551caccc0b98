"""
Built-in build loggers.
"""

from .default_logger import (
    LEFT_COLUMN_SIZE,
    DefaultLogger,
    format_time,
    throwable_message,
)
from .silent_logger import SilentLogger

__all__ = [
    "LEFT_COLUMN_SIZE",
    "DefaultLogger",
    "SilentLogger",
    "format_time",
    "throwable_message",
]
