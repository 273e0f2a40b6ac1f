"""
Edit actions — typed file mutations decoded from a sanitized model response.

The model is asked for ``{"actions": [{"type", "path", "content"?}, ...]}``.
Entries with an unknown or missing ``type`` are kept as
:class:`UnknownAction` so they show up in the per-action results instead of
disappearing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Union

from ..errors import EmptyBatchError, MalformedOutputError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACTIONS = 100
DEFAULT_REVIEW_THRESHOLD = 50


@dataclass(frozen=True)
class CreateAction:
    path: str
    content: str
    kind = "create"


@dataclass(frozen=True)
class UpdateAction:
    path: str
    content: str
    kind = "update"


@dataclass(frozen=True)
class DeleteAction:
    path: str
    kind = "delete"


@dataclass(frozen=True)
class UnknownAction:
    """An entry we could not interpret; always skipped at apply time."""
    kind: str
    path: str = ""
    reason: str = "unrecognized action type"


EditAction = Union[CreateAction, UpdateAction, DeleteAction, UnknownAction]


@dataclass
class EditBatch:
    """Ordered, bounded list of actions parsed from one model response."""
    actions: list[EditAction] = field(default_factory=list)
    truncated_from: int | None = None
    needs_review: bool = False

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self):
        return iter(self.actions)


def _action_from_entry(entry) -> EditAction:
    if not isinstance(entry, dict):
        return UnknownAction(kind=type(entry).__name__,
                             reason="action is not an object")

    raw_kind = entry.get("type")
    path = entry.get("path")
    path = path if isinstance(path, str) else ""
    if not isinstance(raw_kind, str) or not raw_kind.strip():
        return UnknownAction(kind="", path=path)

    kind = raw_kind.strip().lower()
    content = entry.get("content")
    if kind == "delete":
        return DeleteAction(path=path)
    if kind in ("create", "update"):
        if not isinstance(content, str):
            return UnknownAction(kind=kind, path=path, reason="missing content")
        cls = CreateAction if kind == "create" else UpdateAction
        return cls(path=path, content=content)
    return UnknownAction(kind=raw_kind, path=path)


def parse_actions(
    sanitized: str,
    max_actions: int = DEFAULT_MAX_ACTIONS,
    review_threshold: int = DEFAULT_REVIEW_THRESHOLD,
    raw: str = "",
) -> EditBatch:
    """Decode *sanitized* model output into an :class:`EditBatch`.

    Raises :class:`MalformedOutputError` when the text is not a JSON object
    with an ``actions`` list, and :class:`EmptyBatchError` when that list is
    empty.  Oversized batches are truncated to *max_actions*.
    """
    try:
        data = json.loads(sanitized)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise MalformedOutputError(
            f"model output is not valid JSON: {exc}", raw=raw, cleaned=sanitized,
        ) from exc

    if not isinstance(data, dict):
        raise MalformedOutputError(
            f"expected a JSON object, got {type(data).__name__}",
            raw=raw, cleaned=sanitized)
    entries = data.get("actions")
    if not isinstance(entries, list):
        raise MalformedOutputError(
            "model output has no 'actions' list", raw=raw, cleaned=sanitized)
    if not entries:
        raise EmptyBatchError(
            "no actions returned by the model", raw=raw, cleaned=sanitized)

    batch = EditBatch()
    if len(entries) > max_actions:
        logger.warning("[Parser] Model returned %d actions, limiting to %d",
                       len(entries), max_actions)
        batch.truncated_from = len(entries)
        batch.needs_review = True
        entries = entries[:max_actions]
    elif len(entries) > review_threshold:
        logger.warning("[Parser] Model returned %d actions, consider reviewing "
                       "them carefully", len(entries))
        batch.needs_review = True

    batch.actions = [_action_from_entry(e) for e in entries]

    for action in batch.actions:
        if isinstance(action, UnknownAction):
            logger.info("[Parser] - %s (%s): %s", action.kind or "<none>",
                        action.reason, action.path)
        else:
            logger.info("[Parser] - %s: %s", action.kind, action.path)
    return batch
