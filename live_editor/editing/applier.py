"""
Action applier — executes create/update/delete actions against the project
directory, one independent outcome per action.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..errors import PathError
from .actions import (
    CreateAction, DeleteAction, EditAction, UnknownAction, UpdateAction,
)
from .paths import NormalizedPath, PathNormalizer

logger = logging.getLogger(__name__)

_TMP_SUFFIX = ".live_editor_tmp"


class ApplyStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of a single action."""
    action: EditAction
    status: ApplyStatus
    reason: str = ""

    def as_dict(self) -> dict:
        return {
            "type": self.action.kind,
            "path": self.action.path,
            "status": self.status.value,
            "reason": self.reason,
        }


class ActionApplier:
    """Apply edit actions inside the normalizer's project root.

    Calls to :meth:`apply` are serialised by a lock shared by every applier
    for the same root, so concurrent requests never interleave their writes.
    """

    _locks: dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, normalizer: PathNormalizer) -> None:
        self.normalizer = normalizer
        with ActionApplier._locks_guard:
            self._lock = ActionApplier._locks.setdefault(
                normalizer.root, threading.Lock())

    def apply(self, actions: Iterable[EditAction]) -> list[ApplyResult]:
        """Apply *actions* in order; a failing action never stops the rest."""
        with self._lock:
            return [self._apply_one(action) for action in actions]

    def _apply_one(self, action: EditAction) -> ApplyResult:
        if isinstance(action, UnknownAction):
            logger.info("[Applier] Skipped %s action for %s: %s",
                        action.kind or "untyped", action.path or "<no path>",
                        action.reason)
            return ApplyResult(action, ApplyStatus.SKIPPED, action.reason)

        try:
            target = self.normalizer.normalize(action.path)
        except PathError as exc:
            logger.warning("[Applier] Skipped %s %s: %s", action.kind, action.path, exc)
            return ApplyResult(action, ApplyStatus.SKIPPED, str(exc))

        try:
            if isinstance(action, (CreateAction, UpdateAction)):
                self.write_file(target, action.content)
                logger.info("[Applier] %s file: %s", action.kind.title(), target.relative)
                return ApplyResult(action, ApplyStatus.APPLIED)
            if isinstance(action, DeleteAction):
                removed = self.delete_file(target)
                logger.info("[Applier] Deleted file: %s%s", target.relative,
                            "" if removed else " (already absent)")
                return ApplyResult(action, ApplyStatus.APPLIED,
                                   "" if removed else "already absent")
        except (OSError, ValueError) as exc:
            # ValueError covers content the codec refuses, e.g. lone surrogates
            logger.error("[Applier] %s %s failed: %s", action.kind, target.relative, exc)
            return ApplyResult(action, ApplyStatus.FAILED, str(exc))

        return ApplyResult(action, ApplyStatus.SKIPPED, "unrecognized action type")

    @staticmethod
    def _require_normalized(path) -> None:
        if not isinstance(path, NormalizedPath):
            raise TypeError(f"expected NormalizedPath, got {type(path).__name__}")

    @classmethod
    def write_file(cls, path: NormalizedPath, content: str) -> None:
        """Replace the file at *path* with *content* via temp file + rename."""
        cls._require_normalized(path)
        abs_path = path.absolute
        os.makedirs(os.path.dirname(abs_path), exist_ok=True)
        tmp_path = abs_path + _TMP_SUFFIX

        try:
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # os.replace overwrites on every platform
            os.replace(tmp_path, abs_path)
        except BaseException:
            # Clean up temp file on failure
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @classmethod
    def delete_file(cls, path: NormalizedPath) -> bool:
        """Remove the file at *path*; returns False if it did not exist."""
        cls._require_normalized(path)
        try:
            os.remove(path.absolute)
        except FileNotFoundError:
            return False
        return True
