"""
Error taxonomy and validation for the buildctl package.

This module provides the exception classes that decide a run's exit status
and the validators used while interpreting arguments and build files.
"""

from .exceptions import (
    BuildError,
    ConfigurationError,
    ErrorSeverity,
    ExitStatusError,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_exit_status,
    validate_flag_value,
    validate_property_name,
)

__all__ = [
    # Exceptions
    "BuildError",
    "ConfigurationError",
    "ErrorSeverity",
    "ExitStatusError",
    # Error handling
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    # Validators
    "validate_exit_status",
    "validate_flag_value",
    "validate_property_name",
]
