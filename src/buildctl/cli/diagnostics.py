"""
The ``-diagnostics`` report.

Prints the engine version, interpreter and host details, resource figures
and the registered components, to help with bug reports.
"""

import logging
import platform
import sys
from pathlib import Path
from typing import Mapping, Optional, TextIO

import psutil

from ..components.registry import ComponentKind, ComponentRegistry
from ..config.settings import get_engine_version
from ..system.info import collect_resource_info

logger = logging.getLogger(__name__)


def _section(stream: TextIO, title: str) -> None:
    stream.write(f"\n-------------------------------------------\n {title}\n-------------------------------------------\n")


def _write_mapping(stream: TextIO, values: Mapping[str, str]) -> None:
    for key in sorted(values):
        stream.write(f"{key} : {values[key]}\n")


def do_report(
    stream: TextIO,
    registry: ComponentRegistry,
    system_properties: Mapping[str, str],
    cwd: Optional[Path] = None,
) -> None:
    """
    Write the diagnostics report.

    Args:
        stream: Output stream
        registry: Registry whose components are listed
        system_properties: System properties of this invocation
        cwd: Directory whose file system is reported (defaults to the process cwd)
    """
    stream.write("------- buildctl diagnostics report -------\n")
    stream.write(f"{get_engine_version()}\n")

    _section(stream, "Python")
    stream.write(f"version : {platform.python_version()}\n")
    stream.write(f"implementation : {platform.python_implementation()}\n")
    stream.write(f"executable : {sys.executable}\n")
    stream.write(f"psutil : {psutil.__version__}\n")

    _section(stream, "Host")
    stream.write(f"platform : {platform.platform()}\n")
    try:
        _write_mapping(stream, collect_resource_info(cwd))
    except (OSError, psutil.Error) as e:
        logger.warning(f"Failed to collect resource information: {e}")
        stream.write(f"Unable to collect resource information: {e}\n")

    _section(stream, "Components")
    for kind in ComponentKind:
        identifiers = registry.identifiers(kind)
        stream.write(f"{kind.value}s : {', '.join(identifiers) if identifiers else '(none)'}\n")

    _section(stream, "System properties")
    _write_mapping(stream, system_properties)
    stream.flush()
