"""Response envelope returned to the agent runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class TextContent:
    """A single text content block."""

    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolInvocationResult:
    """Content blocks plus an error flag, as tool-calling runtimes expect."""

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolInvocationResult:
        """Build a result holding exactly one text block."""
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def first_text(self) -> str:
        """Text of the first content block, or an empty string."""
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape {"content": [...], "isError": bool}."""
        return {"content": [block.to_dict() for block in self.content], "isError": self.is_error}
