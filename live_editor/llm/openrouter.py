"""
OpenRouter client — speaks the OpenAI-compatible chat/completions API,
so it also works against any other provider exposing that endpoint.
"""

import json

import requests

from .base import LLMClient, LLMError
from ..log_utils import log


class OpenRouterClient(LLMClient):

    name = "OpenRouter"

    def __init__(self, base_url: str, model: str, api_key: str, **kwargs):
        super().__init__(model, **kwargs)
        if not api_key:
            raise LLMError(
                "OpenRouter provider requires an API key. "
                "Set OPENROUTER_API_KEY or add it to .live_editor.yaml.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _payload(self, prompt: str, stream: bool) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "user", "content": prompt},
            ],
            "stream": stream,
        }

    # ── Non-streaming generation ──

    def _generate(self, prompt: str) -> str:
        est_tokens = int(len(prompt.split()) * 1.3)
        log.debug(f"[OpenRouter] Sending ~{est_tokens} est. tokens to {self.model}")
        log.debug(f"[OpenRouter] Prompt:\n{prompt}")

        url = f"{self.base_url}/chat/completions"
        response = requests.post(url, headers=self._headers(),
                                 json=self._payload(prompt, stream=False),
                                 timeout=self._timeouts)
        response.raise_for_status()
        data = response.json()

        if "choices" not in data:
            raise LLMError(f"unexpected OpenRouter response format: {data}")
        choices = data["choices"]
        if not choices:
            raise LLMError("no choices found in OpenRouter response")

        usage = data.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens", est_tokens)
        completion_tokens = usage.get("completion_tokens", 0)
        self._record_usage(
            prompt_tokens if isinstance(prompt_tokens, int) else est_tokens,
            completion_tokens if isinstance(completion_tokens, int) else 0,
        )
        log.debug(f"[OpenRouter] Usage: prompt={prompt_tokens} completion={completion_tokens}")

        response_text = choices[0]["message"]["content"]
        if not isinstance(response_text, str):
            raise LLMError(f"unexpected message format: {choices[0]}")
        log.debug(f"[OpenRouter] Response:\n{response_text}")
        return response_text

    # ── Streaming generation ──

    def _generate_stream(self, prompt: str) -> str:
        est_tokens = int(len(prompt.split()) * 1.3)
        log.debug(f"[OpenRouter] Streaming ~{est_tokens} est. tokens to {self.model}")

        url = f"{self.base_url}/chat/completions"
        content_parts: list[str] = []
        tokens_generated = 0

        response = requests.post(url, headers=self._headers(),
                                 json=self._payload(prompt, stream=True),
                                 stream=True, timeout=self._timeouts)
        response.raise_for_status()

        for line in response.iter_lines(decode_unicode=True):
            if not line or not line.startswith("data: "):
                continue
            data_str = line[6:]
            if data_str.strip() == "[DONE]":
                break
            try:
                chunk = json.loads(data_str)
                delta = chunk.get("choices", [{}])[0].get("delta", {})
            except (json.JSONDecodeError, IndexError, AttributeError):
                continue
            token = delta.get("content") or ""
            if token:
                content_parts.append(token)
                tokens_generated += 1

        result = "".join(content_parts)
        self._record_usage(est_tokens, tokens_generated)
        log.debug(f"[OpenRouter] Streamed {tokens_generated} tokens")
        log.debug(f"[OpenRouter] Response:\n{result}")
        return result
