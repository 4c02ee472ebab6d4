"""Domain layer: errors, constants and schemas."""

from .errors import (
    ConfigExistsError,
    ConfigParseError,
    EditorLaunchError,
    ErrorCodes,
    FlagConflictError,
    InvalidModeError,
    MkError,
    MkIOError,
    PathConflictError,
)
from .schemas import (
    Config,
    ContextVars,
    CreateOptions,
    CreateResult,
    CreateStatus,
    TargetKind,
    TemplateDef,
)

__all__ = [
    # errors
    "MkError",
    "ErrorCodes",
    "ConfigParseError",
    "ConfigExistsError",
    "FlagConflictError",
    "InvalidModeError",
    "PathConflictError",
    "MkIOError",
    "EditorLaunchError",
    # schemas
    "Config",
    "TemplateDef",
    "ContextVars",
    "CreateOptions",
    "CreateResult",
    "CreateStatus",
    "TargetKind",
]
