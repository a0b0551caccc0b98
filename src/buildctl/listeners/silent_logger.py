"""
Logger used by ``-silent``: only failures are reported.
"""

import time

from ..models.config import MessageLevel
from ..models.events import BuildEvent
from .default_logger import BUILD_FAILED_MESSAGE, DefaultLogger, format_time, throwable_message


class SilentLogger(DefaultLogger):
    """
    Prints nothing for a successful build.

    Start and target banners are suppressed. On failure the failure banner,
    the collapsed failure chain and the total time go to the error stream.
    """

    def build_started(self, event: BuildEvent) -> None:
        self.start_time = time.monotonic()

    def build_finished(self, event: BuildEvent) -> None:
        error = event.exception
        if error is None:
            return
        msg = f"\n{BUILD_FAILED_MESSAGE}\n"
        msg += throwable_message(error, self.msg_output_level >= MessageLevel.VERBOSE)
        msg += f"\nTotal time: {format_time(time.monotonic() - self.start_time)}\n"
        self.print_message(msg, self.err, MessageLevel.ERROR)

    def target_started(self, event: BuildEvent) -> None:
        pass
