"""
Invocation configuration models.

This module contains the value produced by the argument interpreter: the
verbosity scale, the immediate-exit actions, and the immutable
BuildConfiguration handed to the lifecycle orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class MessageLevel(IntEnum):
    """
    Output verbosity, ordered from highest priority to most verbose.

    A message is shown when its level is numerically <= the threshold.
    """

    ERROR = 0
    WARN = 1
    INFO = 2
    VERBOSE = 3
    DEBUG = 4


class ImmediateAction(Enum):
    """Flags that short-circuit parsing and never produce a build."""

    HELP = "help"
    VERSION = "version"
    INIT = "init"
    DIAGNOSTICS = "diagnostics"


@dataclass(frozen=True)
class BuildConfiguration:
    """
    Everything a single invocation asked for, frozen after parsing.
    """

    # Explicit -buildfile value, None when the locator should decide.
    build_file: Optional[Path] = None
    # Targets to run, in order. Empty means the project's default target.
    targets: Tuple[str, ...] = ()
    # -listener identifiers, in registration order.
    listeners: Tuple[str, ...] = ()
    logger: Optional[str] = None
    input_handler: Optional[str] = None
    message_level: MessageLevel = MessageLevel.INFO

    emacs_mode: bool = False
    silent: bool = False
    keep_going: bool = False
    strict: bool = False
    show_long_targets: bool = False
    project_help: bool = False

    property_files: Tuple[Path, ...] = ()
    property_file_override: bool = False
    # -D name=value pairs; later occurrences already overwrote earlier ones.
    defined_properties: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    # -find filename, None when no upward search was requested.
    search_for: Optional[str] = None
    # -logfile path, opened by the orchestrator's stream binding.
    log_file: Optional[Path] = None


@dataclass(frozen=True)
class ParsedInvocation:
    """
    Result of interpreting the argument vector.

    Exactly one of ``action`` and ``configuration`` is set.
    """

    action: Optional[ImmediateAction] = None
    action_argument: Optional[str] = None
    configuration: Optional[BuildConfiguration] = None

    @property
    def is_immediate(self) -> bool:
        return self.action is not None
