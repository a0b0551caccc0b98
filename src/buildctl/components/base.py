"""
Capability interfaces for pluggable build components.

This module defines the contracts the Component Resolver checks resolved
instances against:

- BuildListener: receives every lifecycle event, no stream wiring
- BuildLogger: a listener that is additionally bound to an output stream,
  an error stream, a verbosity threshold and an emacs-mode flag
- StreamRequiredBuildLogger: marker for loggers that cannot work without
  those streams and therefore must not be registered as plain listeners
- InputHandler: answers input requests raised by tasks
"""

import abc
from dataclasses import dataclass, field
from typing import Any, Optional, TextIO, Tuple

from ..models.config import MessageLevel
from ..models.events import BuildEvent


class BuildListener(abc.ABC):
    """
    Abstract base class for build event listeners.

    Every handler is called synchronously, in listener registration order.
    """

    @abc.abstractmethod
    def build_started(self, event: BuildEvent) -> None:
        """Called before any target runs."""
        pass

    @abc.abstractmethod
    def build_finished(self, event: BuildEvent) -> None:
        """Called exactly once as the last event; ``event.exception`` holds the failure."""
        pass

    @abc.abstractmethod
    def target_started(self, event: BuildEvent) -> None:
        pass

    @abc.abstractmethod
    def target_finished(self, event: BuildEvent) -> None:
        pass

    @abc.abstractmethod
    def task_started(self, event: BuildEvent) -> None:
        pass

    @abc.abstractmethod
    def task_finished(self, event: BuildEvent) -> None:
        pass

    @abc.abstractmethod
    def message_logged(self, event: BuildEvent) -> None:
        """Called for every message, regardless of its priority."""
        pass


class BuildLogger(BuildListener):
    """
    A listener that renders events to explicitly bound streams.
    """

    @abc.abstractmethod
    def set_message_output_level(self, level: MessageLevel) -> None:
        """Set the threshold; messages with a higher level value are dropped."""
        pass

    @abc.abstractmethod
    def set_output_stream(self, stream: TextIO) -> None:
        pass

    @abc.abstractmethod
    def set_error_stream(self, stream: TextIO) -> None:
        pass

    @abc.abstractmethod
    def set_emacs_mode(self, emacs_mode: bool) -> None:
        """Emacs mode drops the task-name prefix from messages."""
        pass


class StreamRequiredBuildLogger(BuildLogger):
    """Marker base for loggers that only work when the streams are wired."""


@dataclass
class InputRequest:
    """
    A question a task asks the user.

    Attributes:
        prompt: Text shown to the user
        default: Value used when the answer is empty
        choices: Allowed answers; empty means any answer is valid
        value: The answer, set by the input handler
    """

    prompt: str
    default: Optional[str] = None
    choices: Tuple[str, ...] = field(default_factory=tuple)
    value: Optional[str] = None

    def is_valid(self, value: Optional[str]) -> bool:
        if not self.choices:
            return True
        return value in self.choices


class InputHandler(abc.ABC):
    """
    Abstract base class for input handlers.

    Implementations may additionally define ``set_project(project)``; the
    resolver calls it with the running project when present.
    """

    @abc.abstractmethod
    def handle_input(self, request: InputRequest) -> None:
        """
        Fill in ``request.value``.

        Raises:
            BuildError: If no valid answer can be obtained
        """
        pass

    def set_project(self, project: Any) -> None:
        self.project = project
