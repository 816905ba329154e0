"""Agent-callable mdsel tools."""

from mdsel_claude.tools.handlers import call_tool, handle_index, handle_select
from mdsel_claude.tools.result import TextContent, ToolInvocationResult

__all__ = ["TextContent", "ToolInvocationResult", "call_tool", "handle_index", "handle_select"]
