"""
Targets and the built-in tasks.

A Target groups tasks under a name and runs them in order, surrounded by
TargetStarted/TargetFinished events. Each task is likewise surrounded by
TaskStarted/TaskFinished events. Failures raised by a task are tagged with
the task's location before they propagate.
"""

import abc
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ..components.base import InputRequest
from ..models.config import MessageLevel
from ..system.commands import run_command
from ..validation import BuildError, ExitStatusError, validate_exit_status

logger = logging.getLogger(__name__)

LEVEL_NAMES = {
    "error": MessageLevel.ERROR,
    "warning": MessageLevel.WARN,
    "warn": MessageLevel.WARN,
    "info": MessageLevel.INFO,
    "verbose": MessageLevel.VERBOSE,
    "debug": MessageLevel.DEBUG,
}


def parse_level(name: str) -> MessageLevel:
    try:
        return LEVEL_NAMES[str(name).lower()]
    except KeyError:
        raise BuildError(f"Unknown message level '{name}', expected one of: {', '.join(LEVEL_NAMES)}")


@dataclass
class Target:
    """
    A named unit of work.

    Attributes:
        name: Target name
        description: Shown by project help; targets with one are main targets
        depends: Names of targets that must run first
        hidden: Hidden targets are left out of project help
        if_property: Tasks run only when this property is set
        unless_property: Tasks are skipped when this property is set
        tasks: Tasks in execution order
    """

    name: str
    description: Optional[str] = None
    depends: Tuple[str, ...] = ()
    hidden: bool = False
    if_property: Optional[str] = None
    unless_property: Optional[str] = None
    tasks: List["Task"] = field(default_factory=list)

    def add_task(self, task: "Task") -> None:
        task.owning_target = self
        self.tasks.append(task)

    def is_enabled(self, project: Any) -> bool:
        if self.if_property and project.get_property(self.if_property) is None:
            project.log(f"Skipped target '{self.name}' because property '{self.if_property}' not set.",
                        MessageLevel.VERBOSE)
            return False
        if self.unless_property and project.get_property(self.unless_property) is not None:
            project.log(f"Skipped target '{self.name}' because property '{self.unless_property}' set.",
                        MessageLevel.VERBOSE)
            return False
        return True

    def perform(self, project: Any) -> None:
        """Run the tasks, firing TargetStarted and exactly one TargetFinished."""
        project.fire_target_started(self)
        error: Optional[BaseException] = None
        try:
            if self.is_enabled(project):
                for task in self.tasks:
                    task.perform(project)
        except BaseException as exc:
            error = exc
            raise
        finally:
            project.fire_target_finished(self, error)


class Task(abc.ABC):
    """
    Abstract base class for tasks.

    Subclasses set ``task_name`` and implement ``main``.
    """

    task_name = "task"

    def __init__(self):
        self.owning_target: Optional[Target] = None
        self.location: Optional[str] = None

    @abc.abstractmethod
    def main(self, project: Any) -> None:
        pass

    def log(self, project: Any, message: str, level: MessageLevel = MessageLevel.INFO) -> None:
        project.log(message, level, task=self)

    def perform(self, project: Any) -> None:
        project.fire_task_started(self)
        error: Optional[BaseException] = None
        try:
            self.main(project)
        except BuildError as exc:
            if exc.location is None:
                exc.location = self.location
            error = exc
            raise
        except BaseException as exc:
            error = exc
            raise
        finally:
            project.fire_task_finished(self, error)


class EchoTask(Task):
    """Log a message."""

    task_name = "echo"

    def __init__(self, message: str = "", level: str = "info"):
        super().__init__()
        self.message = message
        self.level = parse_level(level)

    def main(self, project: Any) -> None:
        self.log(project, project.replace_properties(self.message), self.level)


class CommandTask(Task):
    """
    Run a shell command in the project base directory.

    Standard output is logged at INFO, standard error at WARN. With
    ``checkreturn`` a non-zero exit code fails the build.
    """

    task_name = "exec"

    def __init__(
        self,
        command: str,
        dir: Optional[str] = None,
        checkreturn: bool = False,
        outputproperty: Optional[str] = None,
        returnproperty: Optional[str] = None,
    ):
        super().__init__()
        self.command = command
        self.dir = dir
        self.checkreturn = checkreturn
        self.outputproperty = outputproperty
        self.returnproperty = returnproperty

    def main(self, project: Any) -> None:
        command = project.replace_properties(self.command)
        cwd = Path(project.base_dir or Path.cwd())
        if self.dir:
            cwd = cwd / project.replace_properties(self.dir)
        if not cwd.is_dir():
            raise BuildError(f"'{cwd}' is not a valid directory")

        self.log(project, f"Executing command: {command}", MessageLevel.VERBOSE)
        return_code, stdout, stderr = run_command(command, cwd)

        for line in stdout.splitlines():
            self.log(project, line, MessageLevel.INFO)
        for line in stderr.splitlines():
            self.log(project, line, MessageLevel.WARN)

        if self.outputproperty:
            project.set_property(self.outputproperty, stdout.rstrip("\n"))
        if self.returnproperty:
            project.set_property(self.returnproperty, return_code)
        if return_code != 0 and self.checkreturn:
            raise BuildError(f"Task exited with code {return_code}")


class PropertyTask(Task):
    """Define a property unless it is already set."""

    task_name = "property"

    def __init__(self, name: str, value: Any = "", override: bool = False):
        super().__init__()
        self.name = name
        self.value = value
        self.override = override

    def main(self, project: Any) -> None:
        if not self.override and project.get_property(self.name) is not None:
            self.log(project, f"Property '{self.name}' already set, not overriding", MessageLevel.VERBOSE)
            return
        project.set_property(self.name, project.replace_properties(str(self.value)))


class FailTask(Task):
    """Fail the build, optionally with an explicit exit status."""

    task_name = "fail"

    def __init__(self, message: str = "", status: Optional[Any] = None):
        super().__init__()
        self.message = message
        self.status = status

    def main(self, project: Any) -> None:
        message = project.replace_properties(self.message) or "No message"
        if self.status is None:
            raise BuildError(message)
        raise ExitStatusError(message, validate_exit_status(self.status))


class InputTask(Task):
    """Ask the project's input handler for a value and store it in a property."""

    task_name = "input"

    def __init__(
        self,
        prompt: str,
        property: str,
        default: Optional[str] = None,
        choices: Tuple[str, ...] = (),
    ):
        super().__init__()
        self.prompt = prompt
        self.property = property
        self.default = default
        self.choices = tuple(str(choice) for choice in choices)

    def main(self, project: Any) -> None:
        if project.get_property(self.property) is not None:
            self.log(project, f"Skipping input, property '{self.property}' already set", MessageLevel.VERBOSE)
            return
        if project.input_handler is None:
            raise BuildError("No input handler is available")

        request = InputRequest(
            prompt=project.replace_properties(self.prompt),
            default=self.default,
            choices=self.choices,
        )
        project.input_handler.handle_input(request)
        project.set_property(self.property, request.value if request.value is not None else "")


TASK_TYPES = {
    EchoTask.task_name: EchoTask,
    CommandTask.task_name: CommandTask,
    PropertyTask.task_name: PropertyTask,
    FailTask.task_name: FailTask,
    InputTask.task_name: InputTask,
}
"""Mapping of task keys in the build file to task classes."""
