"""Prompt text sent to the completion provider for an edit request."""

_EDIT_PROMPT = """You are a helpful AI programming assistant that edits a React + TypeScript project.

Input files are provided as a JSON array of objects with these fields:
[
  {{
    "path": "src/App.tsx",
    "content": "<full file content here>"
  }},
  ...
]

Instructions:
- Follow the user instructions below precisely.
- Return ONLY a JSON object describing an array of actions.
{protected_rules}- You are allowed to create, update, or delete files.
- Do not return any other text, explanations, or comments.
- Do not return any other JSON fields, only "actions".
- Do not return thinking or reasoning steps.
- Each action must be a valid JSON object.
- Each action must have:
  - type: "create", "update", or "delete"
  - path: a relative file path inside the project (e.g. "src/App.tsx")
  - content: full file content (required for create and update; omit for delete)

Example output:

{{
  "actions": [
    {{
      "type": "update",
      "path": "src/App.tsx",
      "content": "<new file content>"
    }},
    {{
      "type": "delete",
      "path": "src/oldFile.tsx"
    }},
    {{
      "type": "create",
      "path": "src/newComponent.tsx",
      "content": "<file content>"
    }}
  ]
}}

User instructions:
{instructions}

Project files (JSON array):
{files_json}
"""


def build_prompt(instructions: str, files_json: str,
                 protected_names: tuple[str, ...] | list[str] = ()) -> str:
    protected_rules = "".join(
        f"- Do not modify the {name} file at all.\n" for name in protected_names
    )
    return _EDIT_PROMPT.format(
        protected_rules=protected_rules,
        instructions=instructions.strip(),
        files_json=files_json,
    )
