"""
Configuration support for the buildctl package.

This module provides the fixed settings shared across the controller and the
loaders for property files given on the command line.
"""

from .loader import (
    flatten_properties,
    load_property_file,
    load_property_files,
    parse_properties,
)
from .settings import (
    DEFAULT_BUILD_CONTENT,
    DEFAULT_BUILD_FILENAME,
    ENGINE_NAME,
    ENGINE_VERSION,
    PropertyNames,
    get_engine_version,
    get_log_level,
)

__all__ = [
    # Loaders
    "flatten_properties",
    "load_property_file",
    "load_property_files",
    "parse_properties",
    # Settings
    "DEFAULT_BUILD_CONTENT",
    "DEFAULT_BUILD_FILENAME",
    "ENGINE_NAME",
    "ENGINE_VERSION",
    "PropertyNames",
    "get_engine_version",
    "get_log_level",
]
