from abc import ABC, abstractmethod

import requests

from ..errors import EditError
from ..log_utils import log, token_tracker


class LLMError(EditError):
    """Raised when the completion provider cannot produce a response."""


class LLMClient(ABC):

    name = "llm"

    def __init__(self, model: str, timeout: float = 300.0, stream: bool = False):
        self.model = model
        self.timeout = timeout
        self.stream = stream
        # Token counts of the most recent call on this client
        self.last_usage: dict = {"prompt": 0, "completion": 0}

    def _record_usage(self, prompt_tokens: int, completion_tokens: int) -> None:
        self.last_usage = {"prompt": prompt_tokens, "completion": completion_tokens}
        token_tracker.record(prompt_tokens, completion_tokens)

    @property
    def _timeouts(self) -> tuple[float, float]:
        # (connect, read) as accepted by requests
        return (min(10.0, self.timeout), self.timeout)

    # ── Public entry point ──

    def generate_response(self, prompt: str) -> str:
        """Send *prompt* to the provider once and return the raw completion text.

        Calls ``_generate_stream`` when streaming is enabled, otherwise
        ``_generate``.  Transport failures, non-success statuses, unexpected
        payloads and empty completions all raise :class:`LLMError`; nothing
        is retried.
        """
        self.last_usage = {"prompt": 0, "completion": 0}
        try:
            if self.stream:
                result = self._generate_stream(prompt)
            else:
                result = self._generate(prompt)
        except LLMError:
            raise
        except requests.exceptions.Timeout as e:
            raise LLMError(f"{self.name} timed out after {self.timeout:.0f}s: {e}") from e
        except requests.exceptions.RequestException as e:
            raise LLMError(f"{self.name} request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise LLMError(f"{self.name} returned an unexpected payload: {e}") from e

        if not result or not result.strip():
            log.warning(f"[{self.name}] Empty response from model {self.model}")
            raise LLMError(f"{self.name} returned an empty response")
        return result

    # ── Subclass hooks ──

    @abstractmethod
    def _generate(self, prompt: str) -> str:
        """Synchronous (non-streaming) generation."""

    @abstractmethod
    def _generate_stream(self, prompt: str) -> str:
        """Streaming generation; returns the concatenated completion text."""
