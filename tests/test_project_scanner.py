import json

import pytest

from live_editor.project_scanner import collect_context_files, format_context_json
from live_editor.prompts import build_prompt


@pytest.fixture
def project(tmp_path):
    (tmp_path / "components").mkdir()
    (tmp_path / "node_modules" / "react").mkdir(parents=True)
    (tmp_path / "App.tsx").write_text("app", encoding="utf-8")
    (tmp_path / "index.css").write_text("body {}", encoding="utf-8")
    (tmp_path / "components" / "Nav.jsx").write_text("nav", encoding="utf-8")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG")
    (tmp_path / "node_modules" / "react" / "index.js").write_text("lib", encoding="utf-8")
    (tmp_path / "big.ts").write_text("x" * 500, encoding="utf-8")
    return tmp_path


def test_collects_matching_files_in_order(project):
    files = collect_context_files(str(project), max_file_bytes=100)
    assert files == [
        ("App.tsx", "app"),
        ("index.css", "body {}"),
        ("components/Nav.jsx", "nav"),
    ]


def test_custom_extensions(project):
    files = collect_context_files(str(project), extensions=[".css"])
    assert [p for p, _ in files] == ["index.css"]


def test_missing_root_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        collect_context_files(str(tmp_path / "nope"))


def test_format_context_json():
    rendered = format_context_json([("App.tsx", "a\nb")])
    assert json.loads(rendered) == [{"path": "App.tsx", "content": "a\nb"}]


def test_build_prompt():
    prompt = build_prompt("  Make the header {blue}  ", '[{"path": "App.tsx"}]',
                          ["SidePanel.tsx"])
    assert "User instructions:\nMake the header {blue}\n" in prompt
    assert '[{"path": "App.tsx"}]' in prompt
    assert "- Do not modify the SidePanel.tsx file at all.\n" in prompt
    assert '"actions": [' in prompt


def test_build_prompt_without_protected_files():
    prompt = build_prompt("x", "[]")
    assert "Do not modify the" not in prompt
    assert "- Return ONLY a JSON object describing an array of actions.\n" \
           "- You are allowed to create" in prompt
