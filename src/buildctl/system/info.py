"""
Host and interpreter information.

This module collects the system properties every project starts with and the
resource figures shown by ``-diagnostics``.
"""

import logging
import os
import platform
import sys
import tempfile
import time
from pathlib import Path
from typing import Dict, Optional

import psutil

from ..config.settings import PropertyNames

logger = logging.getLogger(__name__)


def collect_system_properties(start_dir: Optional[Path] = None) -> Dict[str, str]:
    """
    Collect the host, interpreter and path properties of this invocation.

    Args:
        start_dir: Directory the invocation started in (defaults to the cwd)

    Returns:
        Mapping of property name to value
    """
    uname = platform.uname()
    is_windows = os.name == "nt"
    if is_windows:
        home = os.environ.get("HOMEDRIVE", "") + os.environ.get("HOMEPATH", "")
    else:
        home = os.environ.get("HOME", "")

    properties = {
        "host.os": uname.system or "unknown",
        "os.name": uname.system or "unknown",
        "host.name": uname.node or "unknown",
        "host.arch": uname.machine or "unknown",
        "host.os.release": uname.release or "unknown",
        "host.os.version": uname.version or "unknown",
        "host.fstype": "WINDOWS" if is_windows else "UNIX",
        "user.home": home,
        "python.version": platform.python_version(),
        "python.interpreter": sys.executable,
        "file.separator": os.sep,
        "line.separator": os.linesep,
        "path.separator": os.pathsep,
        "tmp.dir": tempfile.gettempdir(),
        PropertyNames.START_DIR: str(start_dir or Path.cwd()),
        PropertyNames.START_TIME: time.strftime("%a, %d %b %Y %H:%M:%S GMT", time.gmtime()),
    }
    logger.debug(f"Collected {len(properties)} system properties")
    return properties


def collect_resource_info(path: Optional[Path] = None) -> Dict[str, str]:
    """
    Collect CPU, memory and disk figures for the diagnostics report.

    Args:
        path: Directory whose file system is reported (defaults to the cwd)

    Returns:
        Mapping of label to formatted value
    """
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage(str(path or Path.cwd()))
    process = psutil.Process()

    return {
        "cpu.logical": str(psutil.cpu_count(logical=True) or "unknown"),
        "cpu.physical": str(psutil.cpu_count(logical=False) or "unknown"),
        "memory.total": format_bytes(memory.total),
        "memory.available": format_bytes(memory.available),
        "disk.total": format_bytes(disk.total),
        "disk.free": format_bytes(disk.free),
        "process.pid": str(process.pid),
        "process.rss": format_bytes(process.memory_info().rss),
    }


def format_bytes(size: float) -> str:
    """Render a byte count with a binary unit, e.g. ``1.5 GiB``."""
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if abs(size) < 1024 or unit == "TiB":
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TiB"
