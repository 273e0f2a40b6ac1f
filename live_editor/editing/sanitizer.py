"""
Response sanitizer — best-effort cleanup of raw model output before it is
decoded as JSON.

Models wrap the requested JSON object in prose or code fences, and some
transports mangle it with HTML-style escapes.  The fixups here are
heuristic and lossy: a legitimate literal that happens to match one of the
patterns is rewritten too.  They are grouped into a :class:`SanitizePolicy`
so callers can swap in their own list.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

Fixup = Callable[[str], str]


def extract_json_object(text: str) -> str:
    """Keep the span from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start:end + 1]


_NAMED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

_DECODABLE = set(_NAMED_ENTITIES.values())

_ENTITY_RE = re.compile(r"&(?:#(\d{1,4})|#[xX]([0-9a-fA-F]{1,4})|(lt|gt|amp|apos|quot));")


def _decode_entity(match: re.Match) -> str:
    dec, hexa, name = match.groups()
    if name:
        return _NAMED_ENTITIES[name]
    char = chr(int(dec) if dec else int(hexa, 16))
    # Only the markup characters are decoded; anything else stays escaped
    return char if char in _DECODABLE else match.group(0)


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def decode_escaped_markup(text: str) -> str:
    """Turn ``&lt;``, ``&#60;``, ``&#x3C;`` and friends back into ``< > & ' "``.

    Text that already decodes as JSON is left alone: there the entities are
    part of the file content (JSX, HTML) rather than transport damage.
    """
    if "&" not in text or _is_json(text):
        return text
    return _ENTITY_RE.sub(_decode_entity, text)


# A backslash-escaped backslash followed by ``n``, i.e. the JSON text ``\\n``,
# that is not itself preceded by another backslash.
_DOUBLE_ESCAPED_NEWLINE_RE = re.compile(r"(?<!\\)\\\\n")


def repair_double_escaped_newlines(text: str) -> str:
    r"""Rewrite ``\\n`` to ``\n`` inside the JSON text.

    Some models double-escape newlines inside string values, which would
    otherwise decode to a literal backslash-n in the written file.
    """
    return _DOUBLE_ESCAPED_NEWLINE_RE.sub(r"\\n", text)


@dataclass
class SanitizePolicy:
    """Ordered list of named text fixups applied to raw model output."""

    fixups: list[tuple[str, Fixup]] = field(default_factory=list)

    def __call__(self, raw: str) -> str:
        text = raw
        for name, fixup in self.fixups:
            try:
                fixed = fixup(text)
            except Exception as exc:
                logger.warning("[Sanitizer] Fixup %s failed, skipping: %s", name, exc)
                continue
            if fixed != text:
                logger.debug("[Sanitizer] Applied %s", name)
            text = fixed
        return text


def default_policy() -> SanitizePolicy:
    return SanitizePolicy([
        ("extract_json_object", extract_json_object),
        ("decode_escaped_markup", decode_escaped_markup),
        ("repair_double_escaped_newlines", repair_double_escaped_newlines),
    ])


DEFAULT_POLICY = default_policy()


def sanitize(raw: str, policy: SanitizePolicy | None = None) -> str:
    """Clean *raw* model output; returns it unchanged when nothing applies."""
    if not raw:
        return raw or ""
    return (policy or DEFAULT_POLICY)(raw)
