"""
Data models for the build controller.

Configuration Models:
- Verbosity scale and immediate-exit actions
- The immutable per-invocation BuildConfiguration

Event Models:
- Build lifecycle event types and the event value delivered to listeners

Outcome Models:
- The tagged run result that determines the process exit status
"""

# Configuration models
from .config import BuildConfiguration, ImmediateAction, MessageLevel, ParsedInvocation

# Event models
from .events import BuildEvent, BuildEventType

# Outcome models
from .outcome import ExitOutcome, OutcomeKind

__all__ = [
    # Configuration
    "BuildConfiguration",
    "ImmediateAction",
    "MessageLevel",
    "ParsedInvocation",
    # Events
    "BuildEvent",
    "BuildEventType",
    # Outcome
    "ExitOutcome",
    "OutcomeKind",
]
