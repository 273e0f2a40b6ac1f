"""
Path normalizer — maps an untrusted, model-supplied relative path onto a
location inside the project root.

Only :meth:`PathNormalizer.normalize` builds :class:`NormalizedPath` values;
the applier refuses anything else.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Iterable

from ..errors import PathError

_DRIVE_RE = re.compile(r"^[a-zA-Z]:")

_NORMALIZER_TOKEN = object()


@dataclass(frozen=True)
class NormalizedPath:
    """A path proven to lie inside the project root and not to be protected."""
    absolute: str
    relative: str
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self._token is not _NORMALIZER_TOKEN:
            raise TypeError("NormalizedPath values are created by PathNormalizer only")

    def __str__(self) -> str:
        return self.relative


class PathNormalizer:
    """Validate model paths against a fixed project root."""

    def __init__(self, root: str, protected_names: Iterable[str] = ()):
        self.root = os.path.realpath(os.path.abspath(root))
        self.root_name = os.path.basename(self.root)
        self.protected_names = tuple(n for n in protected_names if n)
        self._protected_lower = tuple(n.lower() for n in self.protected_names)

    def is_protected(self, raw_path: str) -> bool:
        lowered = raw_path.lower()
        return any(marker in lowered for marker in self._protected_lower)

    def normalize(self, raw_path: str) -> NormalizedPath:
        """Return the safe absolute location for *raw_path*.

        Raises :class:`PathError` with kind ``protected`` when the path names
        a protected file, ``escape`` when it is absolute, traverses upwards
        or resolves outside the root, and ``invalid`` when nothing is left
        after cleanup.
        """
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise PathError(PathError.INVALID, str(raw_path or ""), "empty path")
        raw = raw_path.strip()
        if "\x00" in raw:
            raise PathError(PathError.INVALID, raw, "path contains a NUL byte")

        if self.is_protected(raw):
            raise PathError(PathError.PROTECTED, raw,
                            f"{raw} is a protected file and cannot be modified")

        unified = raw.replace("\\", "/")
        if unified.startswith("/") or _DRIVE_RE.match(unified) or os.path.isabs(raw):
            raise PathError(PathError.ESCAPE, raw,
                            f"absolute path {raw} is outside the project")
        segments = unified.split("/")
        if ".." in segments:
            raise PathError(PathError.ESCAPE, raw,
                            f"path {raw} traverses outside the project")

        segments = [s for s in segments if s and s != "."]
        # Models often repeat the root folder: "src/App.tsx" when root is .../src
        if len(segments) > 1 and segments[0] == self.root_name:
            segments = segments[1:]
        if not segments:
            raise PathError(PathError.INVALID, raw, f"path {raw} names no file")

        relative = "/".join(segments)
        absolute = os.path.realpath(os.path.join(self.root, *segments))
        try:
            inside = os.path.commonpath([self.root, absolute]) == self.root
        except ValueError:
            inside = False
        if not inside or absolute == self.root:
            raise PathError(PathError.ESCAPE, raw,
                            f"path {raw} resolves outside the project")
        # A symlink inside the root may still point at a protected file
        if self.is_protected(os.path.relpath(absolute, self.root)):
            raise PathError(PathError.PROTECTED, raw,
                            f"{raw} resolves to a protected file and cannot be modified")

        return NormalizedPath(absolute=absolute, relative=relative,
                              _token=_NORMALIZER_TOKEN)
