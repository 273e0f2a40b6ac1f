"""Exception hierarchy shared by the edit pipeline."""

from __future__ import annotations


class EditError(Exception):
    """Base class for every error raised by live_editor."""


class InvalidRequestError(EditError):
    """The caller sent something we cannot act on (unknown provider, empty text)."""


class ParseError(EditError):
    """Model output could not be turned into an edit batch."""

    kind = "parse"

    def __init__(self, message: str, raw: str = "", cleaned: str = ""):
        super().__init__(message)
        self.raw = raw
        self.cleaned = cleaned


class MalformedOutputError(ParseError):
    kind = "malformed"


class EmptyBatchError(ParseError):
    kind = "empty"


class PathError(EditError):
    """A model-supplied path was rejected by the normalizer."""

    PROTECTED = "protected"
    ESCAPE = "escape"
    INVALID = "invalid"

    def __init__(self, kind: str, path: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.path = path


class EditRequestError(EditError):
    """An edit request failed before any action was applied."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.cause = cause
