"""
Reference build engine.

This module provides the project model, targets, the built-in tasks and the
TOML build file configurator the controller drives.
"""

from .configurator import ProjectConfigurator, TomlProjectConfigurator, create_task
from .project import Project
from .target import (
    TASK_TYPES,
    CommandTask,
    EchoTask,
    FailTask,
    InputTask,
    PropertyTask,
    Target,
    Task,
    parse_level,
)

__all__ = [
    # Configuration
    "ProjectConfigurator",
    "TomlProjectConfigurator",
    "create_task",
    # Project model
    "Project",
    "Target",
    # Tasks
    "TASK_TYPES",
    "Task",
    "CommandTask",
    "EchoTask",
    "FailTask",
    "InputTask",
    "PropertyTask",
    "parse_level",
]
