"""Names, descriptions and input schemas of the agent-facing tools."""

from typing import Any

INDEX_TOOL = "mdsel_index"
SELECT_TOOL = "mdsel_select"

INDEX_DESCRIPTION = (
    "Return a selector inventory for Markdown documents. Lists all available selectors "
    "(headings, code blocks, etc.) in hierarchical TEXT format. Call this BEFORE mdsel_select, "
    "and use it instead of the Read tool for large Markdown files."
)

SELECT_DESCRIPTION = (
    "Select content from Markdown documents using declarative selectors. Returns selected content "
    "in TEXT format. Selector syntax: h1.0 (first h1), h2.1-3 (h2 indices 1-3), code.0 (first code "
    "block), h2.0/code.0 (code under h2), namespace::h2.0 (scoped selector). Use mdsel_index first "
    "to discover available selectors."
)

_FILES_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {"type": "string"},
    "minItems": 1,
}

INDEX_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "files": {**_FILES_SCHEMA, "description": "Array of Markdown file paths to index"},
    },
    "required": ["files"],
}

SELECT_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "selector": {
            "type": "string",
            "description": 'Declarative selector to identify content (e.g., "h1.0", "h2.1-3", "code.0")',
        },
        "files": {**_FILES_SCHEMA, "description": "Array of Markdown file paths to select from"},
    },
    "required": ["selector", "files"],
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {"name": INDEX_TOOL, "description": INDEX_DESCRIPTION, "inputSchema": INDEX_INPUT_SCHEMA},
    {"name": SELECT_TOOL, "description": SELECT_DESCRIPTION, "inputSchema": SELECT_INPUT_SCHEMA},
]
