"""
Validation functions shared by the argument interpreter and the engine.

Each validator returns the normalized value or raises the exception type
appropriate to the layer that calls it.
"""

import re
from typing import Any, Optional, Type

from .exceptions import BuildError, ConfigurationError

_PROPERTY_NAME_RE = re.compile(r'^[^\s=]+$')


def validate_flag_value(
    args: list,
    index: int,
    message: str,
) -> str:
    """
    Return the token following ``args[index]``.

    Args:
        args: Remaining argument tokens
        index: Position of the flag that requires a value
        message: Error message used when the value is missing

    Returns:
        The value token

    Raises:
        ConfigurationError: If the flag is the last token
    """
    if index + 1 >= len(args):
        raise ConfigurationError(message)
    return args[index + 1]


def validate_property_name(
    name: Optional[str],
    error_type: Type[Exception] = ConfigurationError,
    field_name: str = "property name",
) -> str:
    """
    Validate a user property name.

    Args:
        name: Property name to validate
        error_type: Exception class raised on failure
        field_name: Name of the field being validated

    Returns:
        Validated property name

    Raises:
        error_type: If the name is empty or contains whitespace or '='
    """
    if not name or not isinstance(name, str):
        raise error_type(f"{field_name} must be a non-empty string")
    if not _PROPERTY_NAME_RE.match(name):
        raise error_type(f"{field_name} must not contain whitespace or '=': {name!r}")
    return name


def validate_exit_status(value: Any, field_name: str = "status") -> int:
    """
    Validate an explicit exit status requested by a build.

    Raises:
        BuildError: If the value is not an integer in the range 0-255
    """
    try:
        status = int(value)
    except (ValueError, TypeError):
        raise BuildError(f"{field_name} must be a valid integer, got {value!r}")
    if status < 0 or status > 255:
        raise BuildError(f"{field_name} must be between 0 and 255, got {status}")
    return status
