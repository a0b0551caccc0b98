"""
Orchestration module for the build lifecycle.

This module contains the components that take a parsed invocation through
to a finished build:

- BuildFileLocator: resolves the build file, searching upward if asked
- OutputStreams: the output/error pair and the -logfile redirection
- EngineContext: the explicit per-invocation environment
- BuildLifecycle: the state machine firing BuildStarted/BuildFinished
- run_invocation/start: the top-level run function and exit mapping
"""

from .build_file_locator import BuildFileLocator
from .context import EngineContext
from .lifecycle import BuildLifecycle, LifecycleState, check_required_version
from .project_help import format_target_list, print_description, print_targets
from .runner import report_outcome, run_build, run_invocation, start
from .streams import LOG_FILE_ERROR, OutputStreams

__all__ = [
    "BuildFileLocator",
    "EngineContext",
    "BuildLifecycle",
    "LifecycleState",
    "check_required_version",
    "format_target_list",
    "print_description",
    "print_targets",
    "report_outcome",
    "run_build",
    "run_invocation",
    "start",
    "LOG_FILE_ERROR",
    "OutputStreams",
]
