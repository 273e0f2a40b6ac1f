"""Edit-action engine — sanitize, parse, normalize and apply model edits."""

from .sanitizer import SanitizePolicy, default_policy, sanitize
from .actions import (
    CreateAction, UpdateAction, DeleteAction, UnknownAction,
    EditAction, EditBatch, parse_actions,
)
from .paths import NormalizedPath, PathNormalizer
from .applier import ActionApplier, ApplyResult, ApplyStatus

__all__ = [
    "SanitizePolicy", "default_policy", "sanitize",
    "CreateAction", "UpdateAction", "DeleteAction", "UnknownAction",
    "EditAction", "EditBatch", "parse_actions",
    "NormalizedPath", "PathNormalizer",
    "ActionApplier", "ApplyResult", "ApplyStatus",
]
