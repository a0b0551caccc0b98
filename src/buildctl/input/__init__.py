"""
Input handlers for interactive and unattended builds.
"""

from .handlers import ConsoleInputHandler, NonInteractiveInputHandler

__all__ = [
    "ConsoleInputHandler",
    "NonInteractiveInputHandler",
]
