"""
The project: property store, listener fan-out and target execution.

A Project is constructed per run by the lifecycle orchestrator, filled in by a
ProjectConfigurator and then asked to execute the requested targets. Every
lifecycle notification goes through its ``fire_*`` methods so listeners see
events in registration order.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from ..models.config import MessageLevel
from ..models.events import BuildEvent, BuildEventType
from ..validation import BuildError, ExitStatusError, validate_property_name

logger = logging.getLogger(__name__)

_PROPERTY_REF_RE = re.compile(r"\$\{([^}]+)\}")


class Project:
    """
    Container for the state of one build.

    Properties are resolved user first, then project, then system, so values
    given on the command line cannot be overwritten by the build file.
    """

    def __init__(self):
        self.name = ""
        self.description: Optional[str] = None
        self.default_target: Optional[str] = None
        self.base_dir: Optional[Path] = None
        self.required_version: Optional[str] = None
        self.keep_going = False
        self.strict = False
        self.input_handler: Any = None
        self.targets: Dict[str, Any] = {}

        self._system_properties: Dict[str, str] = {}
        self._project_properties: Dict[str, str] = {}
        self._user_properties: Dict[str, str] = {}
        self._listeners: List[Any] = []
        self._is_logging_message = False

    def init(self, system_properties: Optional[Mapping[str, str]] = None) -> None:
        """Seed the system properties of this project."""
        self._system_properties = dict(system_properties or {})
        logger.debug(f"Project initialized with {len(self._system_properties)} system properties")

    # Properties

    def set_user_property(self, name: str, value: Any) -> None:
        validate_property_name(name, error_type=BuildError)
        self._user_properties[name] = str(value)

    def set_property(self, name: str, value: Any) -> None:
        """Set a project property; user properties of the same name still win."""
        validate_property_name(name, error_type=BuildError)
        if name in self._user_properties:
            logger.debug(f"Override ignored for user property '{name}'")
            return
        self._project_properties[name] = str(value)

    def get_property(self, name: str) -> Optional[str]:
        for scope in (self._user_properties, self._project_properties, self._system_properties):
            if name in scope:
                return scope[name]
        return None

    def get_properties(self) -> Dict[str, str]:
        merged = dict(self._system_properties)
        merged.update(self._project_properties)
        merged.update(self._user_properties)
        return merged

    def get_user_properties(self) -> Dict[str, str]:
        return dict(self._user_properties)

    def replace_properties(self, text: Optional[str]) -> Optional[str]:
        """
        Replace ``${name}`` references with property values.

        Unknown references are kept verbatim, or raise in strict mode.

        Raises:
            BuildError: In strict mode, if a referenced property is undefined
        """
        if text is None:
            return None

        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            value = self.get_property(name)
            if value is not None:
                return value
            if self.strict:
                raise BuildError(f"Property '{name}' is not defined")
            self.log(f"Property ${{{name}}} has not been set", MessageLevel.VERBOSE)
            return match.group(0)

        return _PROPERTY_REF_RE.sub(substitute, text)

    # Targets

    def add_target(self, target: Any) -> None:
        if target.name in self.targets:
            raise BuildError(f"Duplicate target '{target.name}'")
        self.targets[target.name] = target

    def get_target(self, name: str) -> Any:
        try:
            return self.targets[name]
        except KeyError:
            raise BuildError(f"Target '{name}' does not exist in the project \"{self.name}\".")

    def execute_targets(self, names: Iterable[str]) -> None:
        """
        Execute the given targets in order, each after its dependencies.

        A target runs at most once per call. In keep-going mode a failing
        target does not stop independent targets; targets depending on it are
        skipped and the first failure is raised once everything has run.
        An ExitStatusError always stops the build immediately.

        Raises:
            BuildError: If a target is unknown, re-entered through its own
                dependencies, or fails
        """
        executed: Set[str] = set()
        failed: Set[str] = set()
        first_failure: Optional[BuildError] = None

        for name in names:
            for target in self.topo_sort(name):
                if target.name in executed or target.name in failed:
                    continue
                broken = [dep for dep in target.depends if dep in failed]
                if broken:
                    self.log(
                        f"Target '{target.name}' was not executed because it depends on failed "
                        f"target(s): {', '.join(broken)}",
                        MessageLevel.ERROR,
                    )
                    failed.add(target.name)
                    continue
                try:
                    target.perform(self)
                    executed.add(target.name)
                except ExitStatusError:
                    raise
                except BuildError as e:
                    if not self.keep_going:
                        raise
                    self.log(f"Target '{target.name}' failed: {e}", MessageLevel.ERROR)
                    failed.add(target.name)
                    if first_failure is None:
                        first_failure = e

        if first_failure is not None:
            raise first_failure

    def topo_sort(self, root: str) -> List[Any]:
        """
        Return ``root`` and its transitive dependencies, dependencies first.

        Raises:
            BuildError: If a target is reached again while its own
                dependencies are being resolved
        """
        ordered: List[Any] = []
        visiting: List[str] = []
        done: Set[str] = set()

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                chain = " <- ".join(visiting[visiting.index(name):] + [name])
                raise BuildError(f"Circular dependency: {chain}")
            target = self.get_target(name)
            visiting.append(name)
            for dependency in target.depends:
                visit(dependency)
            visiting.pop()
            done.add(name)
            ordered.append(target)

        visit(root)
        return ordered

    # Listeners and events

    def add_build_listener(self, listener: Any) -> None:
        self._listeners.append(listener)

    def remove_build_listener(self, listener: Any) -> None:
        self._listeners.remove(listener)

    @property
    def build_listeners(self) -> List[Any]:
        return list(self._listeners)

    def _dispatch(self, event: BuildEvent) -> None:
        handler_name = event.type.value
        for listener in list(self._listeners):
            getattr(listener, handler_name)(event)

    def fire_build_started(self) -> None:
        self._dispatch(BuildEvent(BuildEventType.BUILD_STARTED, self))

    def fire_build_finished(self, exception: Optional[BaseException] = None) -> None:
        self._dispatch(BuildEvent(BuildEventType.BUILD_FINISHED, self, exception=exception))

    def fire_target_started(self, target: Any) -> None:
        self._dispatch(BuildEvent(BuildEventType.TARGET_STARTED, self, target=target))

    def fire_target_finished(self, target: Any, exception: Optional[BaseException] = None) -> None:
        self._dispatch(
            BuildEvent(BuildEventType.TARGET_FINISHED, self, target=target, exception=exception)
        )

    def fire_task_started(self, task: Any) -> None:
        self._dispatch(
            BuildEvent(BuildEventType.TASK_STARTED, self, target=task.owning_target, task=task)
        )

    def fire_task_finished(self, task: Any, exception: Optional[BaseException] = None) -> None:
        self._dispatch(
            BuildEvent(
                BuildEventType.TASK_FINISHED, self, target=task.owning_target, task=task, exception=exception
            )
        )

    def fire_message_logged(
        self,
        message: str,
        priority: MessageLevel,
        task: Any = None,
        target: Any = None,
    ) -> None:
        """
        Deliver a message to every listener.

        A listener that logs while a message is being delivered is ignored
        instead of recursing.
        """
        if self._is_logging_message:
            return
        self._is_logging_message = True
        try:
            if task is not None and target is None:
                target = task.owning_target
            self._dispatch(
                BuildEvent(
                    BuildEventType.MESSAGE_LOGGED,
                    self,
                    target=target,
                    task=task,
                    message=message,
                    priority=priority,
                )
            )
        finally:
            self._is_logging_message = False

    def log(self, message: str, level: MessageLevel = MessageLevel.INFO, task: Any = None) -> None:
        self.fire_message_logged(message, level, task=task)
