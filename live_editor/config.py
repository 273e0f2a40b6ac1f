"""
Configuration — loads settings from .live_editor.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

import os

import yaml


_DEFAULTS = {
    "project_root": ".",
    "protected_files": ["SidePanel.tsx"],
    "max_actions": 100,
    "review_threshold": 50,
    "context_extensions": [".tsx", ".ts", ".jsx", ".js", ".css", ".html"],
    "context_max_file_bytes": 200_000,
    "provider": "openrouter",
    "model": "qwen/qwen3-30b-a3b:free",
    "stream": False,
    "llm_timeout": 300.0,
    "openrouter_api_key": "",
    "openrouter_base_url": "https://openrouter.ai/api/v1",
    "ollama_base_url": "http://localhost:11434/api/generate",
    "models": {
        "openrouter": [
            "qwen/qwen3-30b-a3b:free",
            "deepseek/deepseek-chat-v3-0324:free",
            "meta-llama/llama-3.3-70b-instruct:free",
        ],
        "ollama": [
            "qwen2.5-coder:7b",
            "llama3.1:8b",
        ],
    },
    "host": "127.0.0.1",
    "port": 8080,
    "cors_origins": ["*"],
    "log_dir": ".live_editor/logs",
}

PROVIDERS = ("openrouter", "ollama")

# Config file search locations
_CONFIG_FILENAMES = [".live_editor.yaml", ".live_editor.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def _str_list(value, default: list[str]) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return list(default)


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller via ``override``)
    2. Environment variables
    3. .live_editor.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        # Project boundary
        self.PROJECT_ROOT = _get("PROJECT_ROOT", "project_root",
                                 _DEFAULTS["project_root"])
        self.PROTECTED_FILES: list[str] = _str_list(
            yd.get("protected_files"), _DEFAULTS["protected_files"])

        # Batch limits
        self.MAX_ACTIONS = _get("MAX_ACTIONS", "max_actions",
                                _DEFAULTS["max_actions"], cast=int)
        self.REVIEW_THRESHOLD = _get("REVIEW_THRESHOLD", "review_threshold",
                                     _DEFAULTS["review_threshold"], cast=int)

        # Context gathering
        self.CONTEXT_EXTENSIONS: list[str] = _str_list(
            yd.get("context_extensions"), _DEFAULTS["context_extensions"])
        self.CONTEXT_MAX_FILE_BYTES = _get(
            "CONTEXT_MAX_FILE_BYTES", "context_max_file_bytes",
            _DEFAULTS["context_max_file_bytes"], cast=int)

        # Completion providers
        self.DEFAULT_PROVIDER = _get("DEFAULT_PROVIDER", "provider",
                                     _DEFAULTS["provider"])
        self.DEFAULT_MODEL = _get("DEFAULT_MODEL", "model", _DEFAULTS["model"])
        self.STREAM_RESPONSES = _get_bool("STREAM_RESPONSES", "stream",
                                          _DEFAULTS["stream"])
        self.LLM_TIMEOUT = _get("LLM_TIMEOUT", "llm_timeout",
                                _DEFAULTS["llm_timeout"], cast=float)

        openrouter_section = (yd.get("openrouter", {})
                              if isinstance(yd.get("openrouter"), dict) else {})
        self.OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY") or openrouter_section.get(
            "api_key", _DEFAULTS["openrouter_api_key"])
        self.OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL") or openrouter_section.get(
            "base_url", _DEFAULTS["openrouter_base_url"])
        self.OLLAMA_BASE_URL = _get("OLLAMA_BASE_URL", "ollama_base_url",
                                    _DEFAULTS["ollama_base_url"])

        # Model lists offered to the UI, per provider
        self.MODELS: dict[str, list[str]] = {
            name: list(models) for name, models in _DEFAULTS["models"].items()
        }
        models_section = yd.get("models", {})
        if isinstance(models_section, dict):
            for provider in PROVIDERS:
                if provider in models_section:
                    self.MODELS[provider] = _str_list(
                        models_section[provider], self.MODELS[provider])

        # HTTP server
        self.HOST = _get("HOST", "host", _DEFAULTS["host"])
        self.PORT = _get("PORT", "port", _DEFAULTS["port"], cast=int)
        self.CORS_ORIGINS: list[str] = _str_list(
            yd.get("cors_origins"), _DEFAULTS["cors_origins"])

        self.LOG_DIR = _get("LOG_DIR", "log_dir", _DEFAULTS["log_dir"])

    @property
    def project_root(self) -> str:
        """Absolute project root; fixed for the lifetime of the process."""
        return os.path.abspath(self.PROJECT_ROOT)

    def override(self, **values) -> "Config":
        """Apply CLI overrides (``None`` values are ignored)."""
        for key, value in values.items():
            if value is not None:
                setattr(self, key.upper(), value)
        return self

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
