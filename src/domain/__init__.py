"""Domain layer: errors and schemas."""

from .errors import ErrorCodes, ErrorKind, LifecycleError
from .schemas import (
    ActionKind,
    ActionOutcome,
    ActionState,
    AppMode,
    Application,
    ExportArtifact,
    OutcomeStatus,
)

__all__ = [
    "ErrorCodes",
    "ErrorKind",
    "LifecycleError",
    "ActionKind",
    "ActionOutcome",
    "ActionState",
    "AppMode",
    "Application",
    "ExportArtifact",
    "OutcomeStatus",
]
