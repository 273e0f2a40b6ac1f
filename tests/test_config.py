import os

import pytest

from live_editor.config import Config, _find_config_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("PROJECT_ROOT", "MAX_ACTIONS", "REVIEW_THRESHOLD", "DEFAULT_PROVIDER",
                "DEFAULT_MODEL", "STREAM_RESPONSES", "LLM_TIMEOUT", "PORT",
                "OPENROUTER_API_KEY", "OPENROUTER_BASE_URL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = Config({})
    assert cfg.PROTECTED_FILES == ["SidePanel.tsx"]
    assert cfg.MAX_ACTIONS == 100
    assert cfg.REVIEW_THRESHOLD == 50
    assert cfg.DEFAULT_PROVIDER == "openrouter"
    assert cfg.STREAM_RESPONSES is False
    assert cfg.PORT == 8080
    assert set(cfg.MODELS) == {"openrouter", "ollama"}


def test_yaml_values():
    cfg = Config({
        "project_root": "web/src",
        "protected_files": ["SidePanel.tsx", "Secret.ts"],
        "max_actions": 10,
        "stream": True,
        "openrouter": {"api_key": "sk-yaml"},
        "models": {"ollama": ["a", "b"]},
    })
    assert cfg.project_root == os.path.abspath("web/src")
    assert cfg.PROTECTED_FILES == ["SidePanel.tsx", "Secret.ts"]
    assert cfg.MAX_ACTIONS == 10
    assert cfg.STREAM_RESPONSES is True
    assert cfg.OPENROUTER_API_KEY == "sk-yaml"
    assert cfg.MODELS["ollama"] == ["a", "b"]


def test_env_beats_yaml(monkeypatch):
    monkeypatch.setenv("MAX_ACTIONS", "7")
    monkeypatch.setenv("STREAM_RESPONSES", "true")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
    cfg = Config({"max_actions": 10, "stream": False, "openrouter": {"api_key": "sk-yaml"}})
    assert cfg.MAX_ACTIONS == 7
    assert cfg.STREAM_RESPONSES is True
    assert cfg.OPENROUTER_API_KEY == "sk-env"


def test_override_ignores_none():
    cfg = Config({}).override(project_root=None, port=9000)
    assert cfg.PROJECT_ROOT == "."
    assert cfg.PORT == 9000


def test_load_from_explicit_file(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("review_threshold: 5\nhost: 0.0.0.0\n", encoding="utf-8")
    cfg = Config.load(str(path))
    assert cfg.REVIEW_THRESHOLD == 5
    assert cfg.HOST == "0.0.0.0"


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("max_actions: [unclosed\n", encoding="utf-8")
    assert Config.load(str(path)).MAX_ACTIONS == 100


def test_missing_explicit_file():
    assert _find_config_file("/definitely/not/here.yaml") is None
