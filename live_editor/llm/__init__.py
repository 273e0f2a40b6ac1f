from ..config import Config, PROVIDERS
from ..errors import InvalidRequestError
from .base import LLMClient, LLMError
from .ollama import OllamaClient
from .openrouter import OpenRouterClient


def make_client(cfg: Config, provider: str | None = None,
                model: str | None = None) -> LLMClient:
    """Build the completion client for *provider* (default: from config)."""
    provider = (provider or cfg.DEFAULT_PROVIDER).strip().lower()
    model = model or cfg.DEFAULT_MODEL
    llm_kwargs = dict(timeout=cfg.LLM_TIMEOUT, stream=cfg.STREAM_RESPONSES)

    if provider == "ollama":
        return OllamaClient(base_url=cfg.OLLAMA_BASE_URL, model=model, **llm_kwargs)
    if provider == "openrouter":
        return OpenRouterClient(
            base_url=cfg.OPENROUTER_BASE_URL, model=model,
            api_key=cfg.OPENROUTER_API_KEY, **llm_kwargs)
    raise InvalidRequestError(
        f"unknown provider {provider!r} (expected one of: {', '.join(PROVIDERS)})")


__all__ = [
    "LLMClient", "LLMError", "OllamaClient", "OpenRouterClient", "make_client",
]
