"""
Output stream management for the orchestration module.

This module owns the pair of streams all build output is written to. By
default they are the process standard output and error; ``-logfile``
redirects both to a single file, which is then closed exactly once when the
run is finished.
"""

import logging
import sys
from pathlib import Path
from typing import IO, Optional, TextIO

from ..validation import ConfigurationError, ErrorSeverity, handle_file_error

logger = logging.getLogger(__name__)

LOG_FILE_ERROR = (
    "Cannot write on the specified log file. "
    "Make sure the path exists and you have write permissions."
)


class OutputStreams:
    """
    The output/error stream pair of one invocation.

    Individual listeners never close these streams; only ``close`` does.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out: TextIO = out if out is not None else sys.stdout
        self.err: TextIO = err if err is not None else sys.stderr
        self.log_file_path: Optional[Path] = None
        self._log_file: Optional[IO[str]] = None
        self._closed = False

    @property
    def is_log_file_used(self) -> bool:
        return self._log_file is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def redirect_to_log_file(self, path: Path) -> None:
        """
        Send both output and error to ``path`` for the rest of the run.

        Args:
            path: Log file to create or truncate

        Raises:
            ConfigurationError: If the file cannot be opened for writing
        """
        if self._log_file is not None:
            raise ConfigurationError(f"Log file already in use: {self.log_file_path}")
        try:
            handle = open(path, "w", encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to open log file {path}: {e}")
            raise ConfigurationError(LOG_FILE_ERROR, e)

        self._log_file = handle
        self.log_file_path = Path(path)
        self.out = handle
        self.err = handle
        logger.debug(f"Redirected output and error streams to {path}")

    def close(self) -> None:
        """
        Close the log file if one is in use.

        Only the first call has an effect; standard output and error are
        never closed.
        """
        if self._closed:
            logger.debug("Output streams already closed")
            return
        self._closed = True

        if self._log_file is None:
            return
        try:
            self._log_file.close()
            logger.debug(f"Closed log file: {self.log_file_path}")
        except OSError as e:
            handle_file_error(
                error=e,
                context=f"closing log file {self.log_file_path}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
