"""
Project scanner — reads the project's source files so the model sees the
current state of the code it is asked to edit.
"""

import json
import os

SKIP_DIRS = {
    ".git", "node_modules", "__pycache__", "venv", ".venv",
    "dist", "build", ".next", ".nuxt", "coverage", ".cache",
    ".idea", ".vscode", ".live_editor",
}

DEFAULT_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js", ".css", ".html")

_MAX_FILE_SIZE_BYTES = 200_000


def collect_context_files(
    directory: str,
    extensions=DEFAULT_EXTENSIONS,
    max_file_bytes: int = _MAX_FILE_SIZE_BYTES,
) -> list[tuple[str, str]]:
    """Read matching source files under *directory*.

    Returns ``(relative_path, content)`` pairs in a stable walk order.
    Files larger than *max_file_bytes* are left out.  Read errors propagate:
    a context that silently misses files would let the model rewrite them
    blind.
    """
    abs_dir = os.path.abspath(directory)
    if not os.path.isdir(abs_dir):
        raise FileNotFoundError(f"project root does not exist: {abs_dir}")
    exts = tuple(extensions)
    files: list[tuple[str, str]] = []

    for root, dirs, names in os.walk(abs_dir):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)

        for fname in sorted(names):
            if not fname.endswith(exts):
                continue
            fpath = os.path.join(root, fname)
            if os.path.getsize(fpath) > max_file_bytes:
                continue

            rel_path = os.path.relpath(fpath, abs_dir).replace("\\", "/")
            with open(fpath, "r", encoding="utf-8", errors="replace") as f:
                files.append((rel_path, f.read()))

    return files


def format_context_json(files: list[tuple[str, str]]) -> str:
    """Render context files as the JSON array the prompt describes."""
    return json.dumps(
        [{"path": path, "content": content} for path, content in files],
        indent=2,
    )
