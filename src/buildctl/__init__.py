"""
buildctl: build lifecycle controller.

This package turns a command-line invocation into a configured, running
build, sequences its lifecycle events and renders progress and failures
through pluggable loggers.

The package is organized into specialized modules:
- cli: Entry point, argument interpretation and immediate actions
- orchestration: Build file resolution, lifecycle state machine, run outcome
- components: Capability interfaces and the component registry
- listeners: Built-in build loggers
- input: Input handlers
- engine: Project model, targets, tasks and the TOML configurator
- models: Data structures and type definitions
- config: Settings and property file loading
- validation: Error taxonomy and error handling helpers
- system: Command execution and host information

Usage:
    From command line:
        buildctl [options] [target ...]

    Programmatically:
        from buildctl import EngineContext, run_invocation
        outcome = run_invocation(["-f", "build.toml", "dist"], EngineContext.create())
"""

# Main interfaces
from .cli import main_cli
from .orchestration import BuildLifecycle, EngineContext, run_invocation, start

# Model classes for external use
from .models import (
    BuildConfiguration,
    BuildEvent,
    BuildEventType,
    ExitOutcome,
    MessageLevel,
    OutcomeKind,
)

# Components
from .components import (
    BuildListener,
    BuildLogger,
    ComponentKind,
    ComponentRegistry,
    InputHandler,
)

# Errors
from .validation import BuildError, ConfigurationError, ExitStatusError

from .config.settings import ENGINE_VERSION

__version__ = ENGINE_VERSION

__all__ = [
    # Main interfaces
    "main_cli",
    "BuildLifecycle",
    "EngineContext",
    "run_invocation",
    "start",
    # Models
    "BuildConfiguration",
    "BuildEvent",
    "BuildEventType",
    "ExitOutcome",
    "MessageLevel",
    "OutcomeKind",
    # Components
    "BuildListener",
    "BuildLogger",
    "ComponentKind",
    "ComponentRegistry",
    "InputHandler",
    # Errors
    "BuildError",
    "ConfigurationError",
    "ExitStatusError",
]
