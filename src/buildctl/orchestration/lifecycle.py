"""
Build lifecycle orchestration.

This module contains the BuildLifecycle state machine that takes a parsed
BuildConfiguration through

    CONFIGURED -> FILE_RESOLVED -> COMPONENTS_BOUND -> RUNNING -> FINISHED

Failures before RUNNING are configuration failures and fire no events.
Once RUNNING is entered, exactly one BuildFinished event is fired however
the build ends.
"""

import logging
import re
import traceback
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from ..config.loader import load_property_files
from ..config.settings import PropertyNames, get_engine_version
from ..engine.project import Project
from ..models.config import BuildConfiguration, MessageLevel
from ..validation import BuildError
from .build_file_locator import BuildFileLocator
from .context import EngineContext
from .project_help import print_description, print_targets

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    CONFIGURED = "configured"
    FILE_RESOLVED = "file_resolved"
    COMPONENTS_BOUND = "components_bound"
    RUNNING = "running"
    FINISHED = "finished"


def _version_tuple(version: str) -> Tuple[int, ...]:
    parts = []
    for piece in str(version).strip().split("."):
        match = re.match(r"\d+", piece)
        if match is None:
            break
        parts.append(int(match.group(0)))
    return tuple(parts)


def check_required_version(current: str, required: Optional[str]) -> None:
    """
    Fail if the running engine is older than a project requires.

    The development version ``dev`` satisfies every requirement.

    Raises:
        BuildError: If ``current`` is lower than ``required``
    """
    if not required:
        return
    current = current.strip().lower()
    if current == "dev":
        return
    if _version_tuple(current) < _version_tuple(required):
        raise BuildError(f'Incompatible buildctl version ({current}). Version "{required}" required.')


def _format_exception(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__, chain=False))


class BuildLifecycle:
    """
    Drives a single build from configuration to the final event.

    Args:
        configuration: The parsed invocation
        context: Streams, registry and engine collaborators
        additional_user_properties: Properties merged over the -D values
    """

    def __init__(
        self,
        configuration: BuildConfiguration,
        context: EngineContext,
        additional_user_properties: Optional[Mapping[str, str]] = None,
    ):
        self.configuration = configuration
        self.context = context
        self.additional_user_properties = dict(additional_user_properties or {})
        self.state = LifecycleState.CONFIGURED
        self.build_file: Optional[Path] = None
        self.project: Optional[Project] = None
        self.defined_properties: Dict[str, str] = dict(configuration.defined_properties)

    def _transition(self, state: LifecycleState) -> None:
        logger.debug(f"Lifecycle transition: {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> None:
        """
        Execute the whole lifecycle.

        Raises:
            ConfigurationError: If the build file or a component cannot be resolved
            BuildError: If the build fails
        """
        self.resolve_build_file()
        project = self.bind_components()
        with self.build_session(project):
            self._run_build(project)

    def resolve_build_file(self) -> Path:
        """
        Locate the build file and load the property files.

        Raises:
            ConfigurationError: If the build file cannot be resolved
        """
        streams = self.context.streams
        locator = BuildFileLocator(self.context.cwd, streams.out)
        self.build_file = locator.locate(self.configuration).resolve()

        def report(line: str) -> None:
            streams.out.write(line + "\n")

        property_files = [self.context.cwd / path for path in self.configuration.property_files]
        self.defined_properties = load_property_files(
            property_files,
            self.configuration.defined_properties,
            self.configuration.property_file_override,
            report,
        )
        self.defined_properties.update(self.additional_user_properties)

        self._transition(LifecycleState.FILE_RESOLVED)
        logger.info(f"Using build file {self.build_file}")
        return self.build_file

    def bind_components(self) -> Project:
        """
        Create the project and register the logger, listeners and input handler.

        The mandatory user properties are set here, so the first event already
        carries them.

        Raises:
            ConfigurationError: If a component cannot be resolved
        """
        if self.build_file is None:
            raise RuntimeError("bind_components called before the build file was resolved")

        registry = self.context.registry
        streams = self.context.streams
        project = self.context.project_factory()

        project.add_build_listener(registry.create_logger(self.configuration, streams.out, streams.err))
        for identifier in self.configuration.listeners:
            project.add_build_listener(registry.create_listener(identifier))
        project.input_handler = registry.create_input_handler(self.configuration.input_handler, project)

        project.set_user_property(PropertyNames.BUILD_FILE, str(self.build_file))
        project.set_user_property(PropertyNames.BUILD_DIR, str(self.build_file.parent))
        project.set_user_property(PropertyNames.VERSION, get_engine_version())

        self.project = project
        self._transition(LifecycleState.COMPONENTS_BOUND)
        logger.debug(f"Bound {len(project.build_listeners)} listeners")
        return project

    @contextmanager
    def build_session(self, project: Project) -> Iterator[Project]:
        """
        Fire BuildStarted on entry and exactly one BuildFinished on exit.

        In project help mode no BuildFinished is fired; a failure is logged
        at ERROR instead.
        """
        self._transition(LifecycleState.RUNNING)
        error: Optional[BaseException] = None
        try:
            project.fire_build_started()
            yield project
        except BaseException as exc:
            error = exc
            raise
        finally:
            self._transition(LifecycleState.FINISHED)
            self._finish(project, error)

    def _finish(self, project: Project, error: Optional[BaseException]) -> None:
        if self.configuration.project_help:
            if error is not None:
                project.log(str(error), MessageLevel.ERROR)
            return

        try:
            project.fire_build_finished(error)
        except Exception as secondary:
            logger.error(f"Listener failed while finishing the build: {secondary}", exc_info=True)
            err = self.context.streams.err
            err.write("Caught an exception while logging the end of the build.  Exception was:\n")
            err.write(_format_exception(secondary))
            if error is None:
                raise BuildError(cause=secondary)
            err.write("There has been an error prior to that:\n")
            err.write(_format_exception(error))

    def _run_build(self, project: Project) -> None:
        configuration = self.configuration

        project.init(self.context.system_properties)
        project.keep_going = configuration.keep_going
        for name, value in self.defined_properties.items():
            project.set_user_property(name, value)

        self.context.configurator.configure_project(project, self.build_file)
        project.strict = configuration.strict
        check_required_version(self.context.engine_version, project.required_version)

        if configuration.project_help:
            print_description(project)
            print_targets(project)
            return

        targets: List[str] = list(configuration.targets)
        if not targets:
            if not project.default_target:
                raise BuildError("No target specified and no default target defined", location=str(self.build_file))
            targets = [project.default_target]

        logger.info(f"Executing targets: {', '.join(targets)}")
        project.execute_targets(targets)
