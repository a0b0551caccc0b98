"""
Build lifecycle event model.

Events are produced by the project (for target, task and message events) and
by the orchestrator (for build started/finished), and delivered synchronously
to every registered listener in registration order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .config import MessageLevel


class BuildEventType(Enum):
    """The seven lifecycle notifications a listener can receive."""

    BUILD_STARTED = "build_started"
    BUILD_FINISHED = "build_finished"
    TARGET_STARTED = "target_started"
    TARGET_FINISHED = "target_finished"
    TASK_STARTED = "task_started"
    TASK_FINISHED = "task_finished"
    MESSAGE_LOGGED = "message_logged"


@dataclass(frozen=True)
class BuildEvent:
    """
    A single notification about the running build.

    Attributes:
        type: Which lifecycle point this event reports.
        project: The project the event originates from.
        target: Originating target, if any.
        task: Originating task, if any.
        message: Message text for MESSAGE_LOGGED events.
        priority: Severity of the message.
        exception: The failure attached to a *_FINISHED event, if any.
    """

    type: BuildEventType
    project: Any
    target: Optional[Any] = None
    task: Optional[Any] = None
    message: Optional[str] = None
    priority: MessageLevel = MessageLevel.INFO
    exception: Optional[BaseException] = None

    @property
    def target_name(self) -> str:
        return self.target.name if self.target is not None else ""

    @property
    def task_name(self) -> str:
        return self.task.task_name if self.task is not None else ""
