"""
Exception taxonomy and error reporting helpers.

This module defines the three failure families the build controller
distinguishes between, and the logging helpers used wherever an error is
reported without being fatal:

- ConfigurationError: bad command-line usage, missing build file,
  unresolvable component. Always fatal before any build starts.
- BuildError: a failure raised while the build is running. Carries an
  optional location and an optional cause that is stored as ``__cause__``.
- ExitStatusError: a BuildError carrying its own process exit status.
"""

import logging
from enum import Enum
from typing import Optional

_module_logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ConfigurationError(Exception):
    """
    Exception raised when the invocation cannot be turned into a runnable build.

    Args:
        message: Human readable description naming the offending input
        cause: Optional underlying exception
        show_usage: Whether the usage text should be printed before the message
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 show_usage: bool = False):
        super().__init__(message)
        self.message = message
        self.show_usage = show_usage
        if cause is not None:
            self.__cause__ = cause


class BuildError(Exception):
    """
    Exception raised by the build itself while it is running.

    The cause is kept as ``__cause__`` so chains built with ``raise ... from``
    and chains built through the constructor render the same way.
    """

    def __init__(self, message: Optional[str] = None,
                 cause: Optional[BaseException] = None,
                 location: Optional[str] = None):
        if message is None:
            message = str(cause) if cause is not None else "Build failed"
        super().__init__(message)
        self.message = message
        self.location = location
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    def __str__(self) -> str:
        return self.message


class ExitStatusError(BuildError):
    """A build failure that requests a specific process exit status."""

    def __init__(self, message: Optional[str] = None, status: int = 1,
                 location: Optional[str] = None):
        super().__init__(message or f"Build exited with status {status}", location=location)
        self.status = int(status)


_SEVERITY_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def handle_error(
    error: Exception,
    context: str,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log a failure that was caught at a reporting boundary.

    DEBUG and CRITICAL records carry the traceback, the other levels only the
    message.

    Args:
        error: The exception that was caught
        context: What was being done when it happened
        severity: Level the record is logged at
        reraise: Whether the exception propagates after logging
        logger: Logger to write to (defaults to this module's logger)
    """
    log = logger or _module_logger
    log.log(
        _SEVERITY_LEVELS[severity],
        f"Error in {context}: {error}",
        exc_info=error if severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL) else None,
    )
    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Log a failure while setting up the build from its configuration."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Log a failure while reading or writing a file the build depends on."""
    handle_error(error, f"file {context}", **kwargs)
