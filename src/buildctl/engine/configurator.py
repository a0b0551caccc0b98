"""
Build file configurators.

A ProjectConfigurator reads a build file and fills in a Project: its name,
default target, base directory, properties and targets. The TOML
configurator understands files of this shape::

    [project]
    name = "demo"
    default = "build"
    description = "Demo project"
    basedir = "."
    requires = "1.0.0"

    [properties]
    out = "dist"

    [targets.build]
    description = "Build everything"
    depends = ["prepare"]
    tasks = [
        { echo = "Building into ${out}" },
        { exec = "make all", checkreturn = true },
    ]

Each task is an inline table whose first key names the task type.
"""

import abc
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping

from ..config.loader import flatten_properties
from ..validation import BuildError
from .project import Project
from .target import TASK_TYPES, Target, Task

logger = logging.getLogger(__name__)


class ProjectConfigurator(abc.ABC):
    """Abstract base class for build file readers."""

    @abc.abstractmethod
    def configure_project(self, project: Project, build_file: Path) -> None:
        """
        Populate ``project`` from ``build_file``.

        Raises:
            BuildError: If the build file cannot be read or is malformed
        """
        pass


class TomlProjectConfigurator(ProjectConfigurator):
    """Reads TOML build files."""

    def configure_project(self, project: Project, build_file: Path) -> None:
        location = str(build_file)
        logger.debug(f"Parsing build file: {build_file}")
        try:
            with open(build_file, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise BuildError(f"Error parsing build file: {e}", e, location=location)
        except OSError as e:
            raise BuildError(f"Error reading build file: {e}", e, location=location)

        try:
            self._configure(project, build_file, data)
        except BuildError as e:
            if e.location is None:
                e.location = location
            raise
        except (TypeError, ValueError) as e:
            raise BuildError(f"Invalid build file: {e}", e, location=location)

        logger.debug(f"Configured project '{project.name}' with {len(project.targets)} targets")

    def _configure(self, project: Project, build_file: Path, data: Mapping[str, Any]) -> None:
        section = _table(data, "project")
        project.name = str(section.get("name", ""))
        project.description = section.get("description") or None
        project.default_target = section.get("default") or None
        project.required_version = section.get("requires") or None

        base_dir = Path(section.get("basedir", "."))
        if not base_dir.is_absolute():
            base_dir = build_file.parent / base_dir
        project.base_dir = base_dir.resolve()

        for name, value in flatten_properties(_table(data, "properties")).items():
            project.set_property(name, project.replace_properties(value))

        for name, spec in _table(data, "targets").items():
            if not isinstance(spec, Mapping):
                raise BuildError(f"Target '{name}' must be a table")
            project.add_target(self._create_target(name, spec, build_file))

    def _create_target(self, name: str, spec: Mapping[str, Any], build_file: Path) -> Target:
        depends = spec.get("depends", ())
        if isinstance(depends, str):
            depends = [d.strip() for d in depends.split(",") if d.strip()]

        target = Target(
            name=name,
            description=spec.get("description") or None,
            depends=tuple(depends),
            hidden=bool(spec.get("hidden", False)),
            if_property=spec.get("if") or None,
            unless_property=spec.get("unless") or None,
        )
        for index, task_spec in enumerate(spec.get("tasks", [])):
            task = create_task(task_spec)
            task.location = f"{build_file}:targets.{name}.tasks[{index}]"
            target.add_task(task)
        return target


def _table(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise BuildError(f"'{key}' must be a table")
    return value


def create_task(spec: Mapping[str, Any]) -> Task:
    """
    Create a task from its inline table.

    Args:
        spec: Table whose first key is the task type

    Raises:
        BuildError: If the task type is unknown or its attributes are invalid
    """
    if not isinstance(spec, Mapping) or not spec:
        raise BuildError(f"Task definition must be a non-empty table, got {spec!r}")

    task_type, value = next(iter(spec.items()))
    task_class = TASK_TYPES.get(task_type)
    if task_class is None:
        raise BuildError(f"Unknown task '{task_type}', expected one of: {', '.join(TASK_TYPES)}")

    attributes: Dict[str, Any] = {k: v for k, v in spec.items() if k != task_type}
    try:
        return task_class(value, **attributes)
    except TypeError as e:
        raise BuildError(f"Invalid attributes for task '{task_type}': {e}", e)
