"""PreToolUse/PostToolUse hook - reminds the agent to use mdsel for large Markdown files.

Receives one hook event as JSON on stdin. When the agent reads a Markdown
file over the MDSEL_MIN_WORDS threshold, prints the reminder in the shape
the hook event expects. Never blocks the read and always exits 0.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from mdsel_claude.config import GatingConfig, load_config
from mdsel_claude.gating import evaluate_read_event, is_markdown_path
from mdsel_claude.log import debug


def read_file_content(file_path: str) -> str | None:
    """Read a file as text. Returns None if it cannot be read."""
    try:
        return Path(file_path).read_text(encoding="utf-8", errors="replace")
    except (OSError, ValueError) as e:
        debug(f"could not read {file_path}: {e}")
        return None


def build_hook_output(input_data: dict[str, Any], config: GatingConfig) -> dict[str, Any] | None:
    """Build the hook response for one event, or None when no reminder applies."""
    tool_name = input_data.get("tool_name", "")
    tool_input = input_data.get("tool_input") or {}
    file_path = tool_input.get("file_path", "") if isinstance(tool_input, dict) else ""

    # Skip the disk read for anything that can never remind
    if not is_markdown_path(file_path):
        return None

    file_content = read_file_content(file_path)
    decision = evaluate_read_event(tool_name, file_path, file_content, config)
    if not decision.should_remind:
        return None

    if input_data.get("hook_event_name") == "PostToolUse":
        return {
            "hookSpecificOutput": {
                "hookEventName": "PostToolUse",
                "additionalContext": decision.reminder_text,
            }
        }
    return {"continue": True, "systemMessage": decision.reminder_text}


def main() -> None:
    try:
        input_data = json.loads(sys.stdin.read())
        if not isinstance(input_data, dict):
            sys.exit(0)

        output = build_hook_output(input_data, load_config())
        if output is not None:
            print(json.dumps(output))
        sys.exit(0)

    except Exception as e:
        # Fail open on errors
        debug(f"read-reminder hook error: {e}")
        sys.exit(0)


if __name__ == "__main__":
    main()
