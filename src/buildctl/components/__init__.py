"""
Pluggable build components.

This module provides the capability interfaces for loggers, listeners and
input handlers, and the registry that resolves them from identifiers.
"""

# Capability interfaces
from .base import (
    BuildListener,
    BuildLogger,
    InputHandler,
    InputRequest,
    StreamRequiredBuildLogger,
)

# Resolution
from .registry import (
    DEFAULT_INPUT_HANDLER,
    DEFAULT_LOGGER,
    SILENT_LOGGER,
    ComponentKind,
    ComponentRegistry,
    create_default_registry,
)

__all__ = [
    # Interfaces
    "BuildListener",
    "BuildLogger",
    "InputHandler",
    "InputRequest",
    "StreamRequiredBuildLogger",
    # Resolution
    "DEFAULT_INPUT_HANDLER",
    "DEFAULT_LOGGER",
    "SILENT_LOGGER",
    "ComponentKind",
    "ComponentRegistry",
    "create_default_registry",
]
