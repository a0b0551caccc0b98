"""
Component resolution by string identifier.

This module maps identifiers given on the command line (``-logger``,
``-listener``, ``-inputhandler``) to factories, instantiates them and checks
the result against the capability the call site requires. Identifiers that
are not registered are treated as dotted import paths
(``package.module.Class`` or ``package.module:Class``). Every resolution
failure is reported as a ConfigurationError naming the identifier.
"""

import importlib
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TextIO

from ..models.config import BuildConfiguration, MessageLevel
from ..validation import ConfigurationError
from .base import BuildListener, BuildLogger, InputHandler, StreamRequiredBuildLogger

logger = logging.getLogger(__name__)

ComponentFactory = Callable[[], Any]

DEFAULT_LOGGER = "default"
SILENT_LOGGER = "silent"
DEFAULT_INPUT_HANDLER = "console"


class ComponentKind(Enum):
    """The three kinds of pluggable component."""

    LOGGER = "logger"
    LISTENER = "listener"
    INPUT_HANDLER = "input handler"


class ComponentRegistry:
    """
    Registry of component factories keyed by kind and identifier.

    Listeners are looked up in the listener table first and then in the
    logger table, since every logger is also a listener.
    """

    def __init__(self):
        self._factories: Dict[ComponentKind, Dict[str, ComponentFactory]] = {
            kind: {} for kind in ComponentKind
        }

    def register(self, kind: ComponentKind, identifier: str, factory: ComponentFactory) -> None:
        """
        Register a factory under an identifier, replacing any previous one.

        Args:
            kind: Kind of component the factory produces
            identifier: Name used on the command line
            factory: Zero-argument callable returning a new instance
        """
        self._factories[kind][identifier] = factory
        logger.debug(f"Registered {kind.value} '{identifier}'")

    def identifiers(self, kind: ComponentKind) -> List[str]:
        return sorted(self._factories[kind])

    def resolve(self, kind: ComponentKind, identifier: str) -> ComponentFactory:
        """
        Find the factory for an identifier.

        Raises:
            LookupError: If the identifier is neither registered nor importable
        """
        tables = [self._factories[kind]]
        if kind is ComponentKind.LISTENER:
            tables.append(self._factories[ComponentKind.LOGGER])
        for table in tables:
            if identifier in table:
                return table[identifier]
        return _import_factory(kind, identifier)

    def create(self, kind: ComponentKind, identifier: str) -> Any:
        """
        Instantiate the component named by ``identifier``.

        Raises:
            ConfigurationError: If the identifier cannot be resolved or the
                factory fails
        """
        try:
            factory = self.resolve(kind, identifier)
            instance = factory()
        except Exception as e:
            raise ConfigurationError(
                f"Unable to instantiate specified {kind.value} class {identifier} : {e}", e
            )
        logger.debug(f"Created {kind.value} '{identifier}': {type(instance).__name__}")
        return instance

    def create_logger(
        self,
        configuration: BuildConfiguration,
        out: TextIO,
        err: TextIO,
    ) -> BuildLogger:
        """
        Create and wire the single logger of a run.

        ``-silent`` selects the silent logger filtered at WARN; otherwise the
        ``-logger`` identifier is used, falling back to the default logger.

        Raises:
            ConfigurationError: If the logger cannot be created or is not a
                BuildLogger
        """
        level = configuration.message_level
        if configuration.silent:
            identifier = SILENT_LOGGER
            level = MessageLevel.WARN
        else:
            identifier = configuration.logger or DEFAULT_LOGGER

        build_logger = self.create(ComponentKind.LOGGER, identifier)
        if not isinstance(build_logger, BuildLogger):
            raise ConfigurationError(
                f"Specified logger class {identifier} does not implement the BuildLogger interface."
            )

        build_logger.set_message_output_level(level)
        build_logger.set_output_stream(out)
        build_logger.set_error_stream(err)
        build_logger.set_emacs_mode(configuration.emacs_mode)
        return build_logger

    def create_listener(self, identifier: str) -> BuildListener:
        """
        Create a plain listener.

        Raises:
            ConfigurationError: If the listener cannot be created, is not a
                BuildListener, or requires explicit streams
        """
        listener = self.create(ComponentKind.LISTENER, identifier)
        if isinstance(listener, StreamRequiredBuildLogger):
            raise ConfigurationError(
                f"Unable to add {identifier} as a listener, since it requires explicit "
                f"error/output streams. (You can specify it as a -logger.)"
            )
        if not isinstance(listener, BuildListener):
            raise ConfigurationError(
                f"Specified listener class {identifier} does not implement the BuildListener interface."
            )
        return listener

    def create_input_handler(self, identifier: Optional[str], project: Any = None) -> InputHandler:
        """
        Create the input handler, using the console handler when none is named.

        The handler receives a back-reference to the project when it accepts one.
        """
        handler = self.create(ComponentKind.INPUT_HANDLER, identifier or DEFAULT_INPUT_HANDLER)
        set_project = getattr(handler, "set_project", None)
        if project is not None and callable(set_project):
            set_project(project)
        return handler


def _import_factory(kind: ComponentKind, identifier: str) -> ComponentFactory:
    if ":" in identifier:
        module_name, _, attribute = identifier.partition(":")
    elif "." in identifier:
        module_name, _, attribute = identifier.rpartition(".")
    else:
        raise LookupError(f"no {kind.value} registered under '{identifier}'")

    if not module_name or not attribute:
        raise LookupError(f"invalid {kind.value} path '{identifier}'")

    module = importlib.import_module(module_name)
    try:
        factory = getattr(module, attribute)
    except AttributeError:
        raise LookupError(f"module '{module_name}' has no attribute '{attribute}'")
    if not callable(factory):
        raise LookupError(f"'{identifier}' is not callable")
    return factory


def create_default_registry(
    input_stream: Optional[TextIO] = None, prompt_stream: Optional[TextIO] = None
) -> ComponentRegistry:
    """
    Create a registry holding the built-in loggers and input handlers.

    Args:
        input_stream: Stream the console input handler reads answers from
        prompt_stream: Stream the console input handler writes prompts to

    Returns:
        A new registry; callers may register additional components on it
    """
    from ..input.handlers import ConsoleInputHandler, NonInteractiveInputHandler
    from ..listeners.default_logger import DefaultLogger
    from ..listeners.silent_logger import SilentLogger

    registry = ComponentRegistry()
    registry.register(ComponentKind.LOGGER, DEFAULT_LOGGER, DefaultLogger)
    registry.register(ComponentKind.LOGGER, SILENT_LOGGER, SilentLogger)
    registry.register(
        ComponentKind.INPUT_HANDLER,
        DEFAULT_INPUT_HANDLER,
        lambda: ConsoleInputHandler(input_stream, prompt_stream),
    )
    registry.register(ComponentKind.INPUT_HANDLER, "noninteractive", NonInteractiveInputHandler)
    return registry
