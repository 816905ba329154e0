"""Decide whether a file read should trigger the mdsel reminder.

The decision is stateless: the same file read twice reminds twice, and the
reminder text never changes between calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from mdsel_claude.config import GatingConfig
from mdsel_claude.log import debug
from mdsel_claude.word_count import count_words

MARKDOWN_EXTENSIONS = (".md", ".markdown")

# Tool names hosts use for whole-file reads
READ_TOOL_NAMES = frozenset({"Read", "read"})

REMINDER_TEXT = (
    "This is a Markdown file over the configured size threshold.\n"
    "Use mdsel_index and mdsel_select instead of Read."
)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of gating one file read."""

    should_remind: bool
    reminder_text: str | None = None


NO_REMINDER = GateDecision(should_remind=False)


def is_markdown_path(file_path: str | None) -> bool:
    """Check if a path ends in a Markdown extension (case-insensitive)."""
    if not isinstance(file_path, str):
        return False
    return file_path.lower().endswith(MARKDOWN_EXTENSIONS)


def decide(file_path: str | None, file_content: str | None, config: GatingConfig) -> GateDecision:
    """Gate a single read of file_path.

    Reminds only for Markdown files whose word count is strictly greater
    than config.min_words. Never raises; anything that cannot be evaluated
    yields no reminder.
    """
    try:
        if not is_markdown_path(file_path) or not isinstance(file_content, str):
            return NO_REMINDER
        word_count = count_words(file_content)
        if word_count > config.min_words:
            debug(f"{file_path}: {word_count} words > {config.min_words}, reminding")
            return GateDecision(should_remind=True, reminder_text=REMINDER_TEXT)
        return NO_REMINDER
    except Exception as e:
        debug(f"gating failed for {file_path!r}: {e}")
        return NO_REMINDER


def evaluate_read_event(
    tool_name: str | None,
    file_path: str | None,
    file_content: str | None,
    config: GatingConfig,
) -> GateDecision:
    """Gate a host file-read interception event.

    Only read-like tools are gated; any other tool never reminds.
    """
    if not isinstance(tool_name, str) or tool_name not in READ_TOOL_NAMES:
        return NO_REMINDER
    return decide(file_path, file_content, config)
