"""
Command-line interface for the buildctl package.

This module provides the CLI entry point, the argument interpreter and the
immediate-exit actions.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
