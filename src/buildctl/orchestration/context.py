"""
Engine context for one invocation.

Everything that would otherwise be process-wide state (the output streams,
the component registry, the working directory, system properties and the
build engine collaborators) is carried explicitly in an EngineContext and
handed to the orchestrator.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, TextIO

from ..components.registry import ComponentRegistry, create_default_registry
from ..config.settings import ENGINE_VERSION
from ..engine.configurator import ProjectConfigurator, TomlProjectConfigurator
from ..engine.project import Project
from ..system.info import collect_system_properties
from .streams import OutputStreams

logger = logging.getLogger(__name__)


@dataclass
class EngineContext:
    """
    Collaborators and environment shared by the parts of one run.

    Attributes:
        streams: Output/error stream pair, possibly redirected to a log file
        registry: Resolver for loggers, listeners and input handlers
        cwd: Working directory of the invocation
        stdin: Stream interactive input is read from
        system_properties: Properties every project is seeded with
        configurator: Reader turning a build file into a configured project
        project_factory: Creates the project of a run
        engine_version: Version compared against a project's requirement
    """

    streams: OutputStreams
    registry: ComponentRegistry
    cwd: Path
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    system_properties: Dict[str, str] = field(default_factory=dict)
    configurator: ProjectConfigurator = field(default_factory=TomlProjectConfigurator)
    project_factory: Callable[[], Project] = Project
    engine_version: str = ENGINE_VERSION

    @classmethod
    def create(
        cls,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        stdin: Optional[TextIO] = None,
        cwd: Optional[Path] = None,
    ) -> "EngineContext":
        """
        Build a context with the default registry and collaborators.

        Args:
            out: Standard output stream (defaults to ``sys.stdout``)
            err: Error output stream (defaults to ``sys.stderr``)
            stdin: Input stream (defaults to ``sys.stdin``)
            cwd: Working directory (defaults to the process cwd)
        """
        streams = OutputStreams(out, err)
        stdin = stdin if stdin is not None else sys.stdin
        cwd = Path(cwd) if cwd is not None else Path.cwd()
        context = cls(
            streams=streams,
            registry=create_default_registry(stdin, streams.out),
            cwd=cwd,
            stdin=stdin,
            system_properties=collect_system_properties(cwd),
        )
        logger.debug(f"Engine context created for {cwd}")
        return context
