"""
Edit orchestrator — serves one edit request end to end.

Example usage::

    from live_editor import Config, EditOrchestrator

    cfg = Config.load()
    summary = EditOrchestrator(cfg).handle_edit_request(
        "Add a dark mode toggle to the header",
        provider="ollama",
        model="qwen2.5-coder:7b",
    )
    print(summary.counts)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable

from .config import Config, PROVIDERS
from .editing import (
    ActionApplier, ApplyResult, ApplyStatus, PathNormalizer,
    SanitizePolicy, parse_actions, sanitize,
)
from .errors import EditRequestError, InvalidRequestError, ParseError
from .llm import LLMClient, make_client
from .log_utils import token_tracker
from .project_scanner import collect_context_files, format_context_json
from .prompts import build_prompt

logger = logging.getLogger(__name__)


@dataclass
class EditSummary:
    """Structured result returned by :meth:`EditOrchestrator.handle_edit_request`."""
    results: list[ApplyResult] = field(default_factory=list)
    truncated_from: int | None = None
    needs_review: bool = False
    token_usage: dict = field(default_factory=dict)

    @property
    def counts(self) -> dict[str, int]:
        tally = Counter(r.status for r in self.results)
        return {status.value: tally.get(status, 0) for status in ApplyStatus}

    def as_dict(self) -> dict:
        return {
            "status": "success",
            "applied": len(self.results),
            "counts": self.counts,
            "truncated_from": self.truncated_from,
            "needs_review": self.needs_review,
            "token_usage": self.token_usage,
            "results": [r.as_dict() for r in self.results],
        }


class EditOrchestrator:
    """Compose context gathering, prompting, completion and the edit engine.

    The collaborators are injectable so the pipeline can run against a fake
    provider or an in-memory context in tests.
    """

    def __init__(
        self,
        cfg: Config,
        client_factory: Callable[[Config, str, str], LLMClient] = make_client,
        context_gatherer: Callable[[str], list[tuple[str, str]]] | None = None,
        prompt_builder: Callable[..., str] = build_prompt,
        sanitize_policy: SanitizePolicy | None = None,
    ) -> None:
        self.cfg = cfg
        self.project_root = cfg.project_root
        self.protected_names = tuple(cfg.PROTECTED_FILES)
        self.normalizer = PathNormalizer(self.project_root, self.protected_names)
        self.applier = ActionApplier(self.normalizer)
        self._client_factory = client_factory
        self._context_gatherer = context_gatherer or self._gather_context
        self._prompt_builder = prompt_builder
        self._sanitize_policy = sanitize_policy

    def _gather_context(self, root: str) -> list[tuple[str, str]]:
        return collect_context_files(
            root,
            extensions=self.cfg.CONTEXT_EXTENSIONS,
            max_file_bytes=self.cfg.CONTEXT_MAX_FILE_BYTES,
        )

    def handle_edit_request(self, instructions: str, provider: str | None = None,
                            model: str | None = None) -> EditSummary:
        """Run gather → prompt → provider → sanitize → parse → apply.

        Raises :class:`InvalidRequestError` for a bad request and
        :class:`EditRequestError` (with the failing ``stage``) when any step
        before applying fails.  Once parsing succeeds every action is
        attempted and reported in the returned :class:`EditSummary`.
        """
        if not instructions or not instructions.strip():
            raise InvalidRequestError("instructions must not be empty")
        provider = (provider or self.cfg.DEFAULT_PROVIDER).strip().lower()
        if provider not in PROVIDERS:
            raise InvalidRequestError(
                f"unknown provider {provider!r} (expected one of: {', '.join(PROVIDERS)})")
        model = model or self.cfg.DEFAULT_MODEL

        logger.info("[Edit] Request via %s/%s: %s", provider, model,
                    instructions.strip()[:200])

        try:
            files = self._context_gatherer(self.project_root)
        except Exception as exc:
            logger.error("[Edit] Gathering context failed: %s", exc)
            raise EditRequestError("context", exc) from exc
        logger.info("[Edit] Gathered %d context files", len(files))

        try:
            prompt = self._prompt_builder(
                instructions, format_context_json(files), self.protected_names)
        except Exception as exc:
            logger.error("[Edit] Building prompt failed: %s", exc)
            raise EditRequestError("prompt", exc) from exc

        try:
            client = self._client_factory(self.cfg, provider, model)
            logger.info("[Edit] Sending prompt (%d chars) to %s", len(prompt), provider)
            raw = client.generate_response(prompt)
        except Exception as exc:
            logger.error("[Edit] Completion provider failed: %s", exc)
            raise EditRequestError("provider", exc) from exc

        cleaned = sanitize(raw, self._sanitize_policy)
        try:
            batch = parse_actions(
                cleaned,
                max_actions=self.cfg.MAX_ACTIONS,
                review_threshold=self.cfg.REVIEW_THRESHOLD,
                raw=raw,
            )
        except ParseError as exc:
            logger.warning("[Edit] Could not parse model output (%s): %s", exc.kind, exc)
            logger.debug("[Edit] Raw output:\n%s", raw)
            logger.debug("[Edit] Cleaned output:\n%s", cleaned)
            raise EditRequestError("parse", exc) from exc
        logger.info("[Edit] Model suggested %d actions", len(batch))

        results = self.applier.apply(batch)
        usage = getattr(client, "last_usage", None)
        summary = EditSummary(
            results=results,
            truncated_from=batch.truncated_from,
            needs_review=batch.needs_review,
            token_usage=dict(usage) if isinstance(usage, dict) else {},
        )
        logger.info("[Edit] Token usage: %s (session: %s)",
                    summary.token_usage, token_tracker.as_dict())
        logger.info("[Edit] Done: %s", summary.counts)
        return summary


def handle_edit_request(instructions: str, provider: str | None = None,
                        model: str | None = None,
                        config_path: str | None = None) -> EditSummary:
    """One-shot helper: load config and serve a single edit request."""
    cfg = Config.load(config_path)
    return EditOrchestrator(cfg).handle_edit_request(instructions, provider, model)
