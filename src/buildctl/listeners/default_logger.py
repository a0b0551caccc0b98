"""
The default build event logger.

Renders lifecycle events to an output stream and an error stream, filtered by
a verbosity threshold. On failure it prints the failure chain with redundant
wrapper text collapsed, followed by the elapsed build time.
"""

import logging
import sys
import time
import traceback
from typing import List, Optional, TextIO

from ..components.base import StreamRequiredBuildLogger
from ..config.settings import PropertyNames
from ..models.config import MessageLevel
from ..models.events import BuildEvent
from ..validation import BuildError

logger = logging.getLogger(__name__)

# Width of the right-aligned "[task] " column in front of task messages.
LEFT_COLUMN_SIZE = 12

BUILD_SUCCESSFUL_MESSAGE = "BUILD FINISHED"
BUILD_FAILED_MESSAGE = "BUILD FAILED"


def format_time(seconds: float) -> str:
    """
    Format an elapsed time for the build summary.

    Args:
        seconds: Elapsed wall-clock seconds

    Returns:
        ``"<M> minute(s) <S.SS> second(s)"`` from one minute upwards,
        ``"<S.SSSS> second(s)"`` below

    Examples:
        >>> format_time(65.0)
        '1 minute 5.00 seconds'
        >>> format_time(3.5)
        '3.5000 seconds'
    """
    # Round to the displayed precision first so 59.99999 never shows as 60.
    shown = round(seconds, 4)
    if shown < 60:
        second_unit = "second" if int(shown) == 1 else "seconds"
        return f"{shown:.4f} {second_unit}"

    shown = round(seconds, 2)
    minutes = int(shown // 60)
    remainder = round(shown - minutes * 60, 2)
    minute_unit = "minute" if minutes == 1 else "minutes"
    second_unit = "second" if int(remainder) == 1 else "seconds"
    return f"{minutes} {minute_unit} {remainder:.2f} {second_unit}"


def _format_trace(error: BaseException) -> str:
    return "".join(traceback.format_tb(error.__traceback__)).rstrip("\n")


def _message_of(error: BaseException) -> str:
    if isinstance(error, BuildError):
        return error.message
    return str(error)


def throwable_message(error: BaseException, verbose: bool) -> str:
    """
    Render a failure chain for the BUILD FAILED banner.

    While an outer BuildError's message ends with its cause's message, only
    the outer prefix is kept and rendering moves on to the cause, so the same
    underlying text is never printed twice. In verbose mode the remaining
    link is printed with its type and trace, followed by every further cause;
    otherwise only its location and message are printed.

    Args:
        error: The failure attached to the BuildFinished event
        verbose: Whether types and traces should be included

    Returns:
        The rendered text, ending with a newline
    """
    parts: List[str] = []

    while isinstance(error, BuildError):
        cause = error.__cause__
        if cause is None:
            break
        outer = _message_of(error).strip()
        inner = _message_of(cause).strip()
        if not outer.endswith(inner):
            break
        prefix = outer[: len(outer) - len(inner)].rstrip()
        if prefix:
            parts.append(prefix + " ")
        error = cause

    location = error.location if isinstance(error, BuildError) else None
    if verbose:
        if location:
            parts.append(f"{location}\n")
        parts.append(f"[{type(error).__name__}] {_message_of(error)}\n{_format_trace(error)}\n")
        cause = error.__cause__
        while cause is not None:
            parts.append(f"[Caused by {type(cause).__name__}] {_message_of(cause)}\n{_format_trace(cause)}\n")
            cause = cause.__cause__
    else:
        parts.append(f"{location} " if location else "")
        parts.append(f"{_message_of(error)}\n")

    return "".join(parts)


class DefaultLogger(StreamRequiredBuildLogger):
    """
    Writes build progress to the bound streams.

    ERROR messages go to the error stream; everything else that passes the
    threshold goes to the output stream.
    """

    def __init__(self):
        self.msg_output_level = MessageLevel.ERROR
        self.out: TextIO = sys.stdout
        self.err: TextIO = sys.stderr
        self.emacs_mode = False
        self.start_time = time.monotonic()

    def set_message_output_level(self, level: MessageLevel) -> None:
        self.msg_output_level = MessageLevel(level)

    def set_output_stream(self, stream: TextIO) -> None:
        self.out = stream

    def set_error_stream(self, stream: TextIO) -> None:
        self.err = stream

    def set_emacs_mode(self, emacs_mode: bool) -> None:
        self.emacs_mode = emacs_mode

    def build_started(self, event: BuildEvent) -> None:
        self.start_time = time.monotonic()
        if self.msg_output_level >= MessageLevel.INFO:
            build_file = event.project.get_property(PropertyNames.BUILD_FILE)
            self.print_message(f"Buildfile: {build_file}", self.out, MessageLevel.INFO)

    def build_finished(self, event: BuildEvent) -> None:
        error = event.exception
        if error is None:
            msg = f"\n{BUILD_SUCCESSFUL_MESSAGE}\n"
        else:
            msg = f"\n{BUILD_FAILED_MESSAGE}\n"
            msg += throwable_message(error, self.msg_output_level >= MessageLevel.VERBOSE)
        msg += f"\nTotal time: {format_time(time.monotonic() - self.start_time)}\n"

        if error is None:
            self.print_message(msg, self.out, MessageLevel.VERBOSE)
        else:
            self.print_message(msg, self.err, MessageLevel.ERROR)

    def target_started(self, event: BuildEvent) -> None:
        if self.msg_output_level < MessageLevel.INFO or not event.target_name:
            return
        show_long_targets = event.project.get_property(PropertyNames.SHOW_LONG_TARGETS)
        description = f" [{event.target.description or ''}]" if show_long_targets else ""
        msg = f"\n{event.project.name} > {event.target_name}{description}:\n"
        self.print_message(msg, self.out, event.priority)

    def target_finished(self, event: BuildEvent) -> None:
        pass

    def task_started(self, event: BuildEvent) -> None:
        pass

    def task_finished(self, event: BuildEvent) -> None:
        pass

    def message_logged(self, event: BuildEvent) -> None:
        priority = event.priority
        if priority > self.msg_output_level:
            return

        msg = ""
        if event.task is not None and not self.emacs_mode:
            msg = f"[{event.task_name}] ".rjust(LEFT_COLUMN_SIZE)
        msg += event.message or ""

        if priority != MessageLevel.ERROR:
            self.print_message(msg, self.out, priority)
        else:
            self.print_message(msg, self.err, priority)

    def print_message(self, message: str, stream: Optional[TextIO], priority: MessageLevel) -> None:
        """
        Write one message followed by a newline.

        The priority is ignored here; subclasses may use it.
        """
        if stream is None:
            logger.debug(f"No stream bound, dropping message: {message!r}")
            return
        stream.write(message + "\n")
        stream.flush()
