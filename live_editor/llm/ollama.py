import json

import requests

from .base import LLMClient
from ..log_utils import log


class OllamaClient(LLMClient):

    name = "Ollama"

    def __init__(self, base_url: str, model: str, **kwargs):
        super().__init__(model, **kwargs)
        self.base_url = base_url

    # ── Non-streaming generation ──

    def _generate(self, prompt: str) -> str:
        est_tokens = int(len(prompt.split()) * 1.3)
        log.debug(f"[Ollama] Sending ~{est_tokens} est. tokens to {self.model}")
        log.debug(f"[Ollama] Prompt:\n{prompt}")

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
        }
        response = requests.post(self.base_url, json=payload, timeout=self._timeouts)
        response.raise_for_status()
        data = response.json()
        result = data["response"]

        prompt_tokens = data.get("prompt_eval_count", est_tokens)
        completion_tokens = data.get("eval_count", 0)
        self._record_usage(
            prompt_tokens if isinstance(prompt_tokens, int) else est_tokens,
            completion_tokens if isinstance(completion_tokens, int) else 0,
        )
        log.debug(f"[Ollama] Usage: prompt={prompt_tokens} completion={completion_tokens}")
        log.debug(f"[Ollama] Response:\n{result}")
        return result

    # ── Streaming generation ──

    def _generate_stream(self, prompt: str) -> str:
        est_tokens = int(len(prompt.split()) * 1.3)
        log.debug(f"[Ollama] Streaming ~{est_tokens} est. tokens to {self.model}")

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": True,
            "format": "json",
        }
        content_parts: list[str] = []
        tokens_generated = 0
        prompt_tokens = est_tokens

        response = requests.post(self.base_url, json=payload,
                                 stream=True, timeout=self._timeouts)
        response.raise_for_status()

        for line in response.iter_lines(decode_unicode=True):
            if not line:
                continue
            try:
                chunk = json.loads(line)
            except json.JSONDecodeError:
                continue
            token = chunk.get("response", "")
            if token:
                content_parts.append(token)
                tokens_generated += 1

            # Final chunk contains token counts
            if chunk.get("done", False):
                prompt_tokens = chunk.get("prompt_eval_count", est_tokens)
                eval_count = chunk.get("eval_count", tokens_generated)
                tokens_generated = eval_count if isinstance(eval_count, int) else tokens_generated

        result = "".join(content_parts)
        self._record_usage(
            prompt_tokens if isinstance(prompt_tokens, int) else est_tokens,
            tokens_generated,
        )
        log.debug(f"[Ollama] Streamed {tokens_generated} tokens")
        log.debug(f"[Ollama] Response:\n{result}")
        return result
