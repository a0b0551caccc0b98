"""
System interaction utilities.

This module provides command execution for the ``exec`` task and the host
information used for system properties and the diagnostics report.
"""

# Command execution
from .commands import run_command

# Host information
from .info import collect_resource_info, collect_system_properties, format_bytes

__all__ = [
    # Commands
    "run_command",
    # Host information
    "collect_resource_info",
    "collect_system_properties",
    "format_bytes",
]
