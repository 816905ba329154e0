"""MCP stdio server exposing mdsel_index and mdsel_select.

Routing only: all tool behavior lives in mdsel_claude.tools.handlers.
"""

from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from mdsel_claude import __version__
from mdsel_claude.log import debug
from mdsel_claude.tools.definitions import TOOL_DEFINITIONS
from mdsel_claude.tools.handlers import call_tool

SERVER_NAME = "mdsel-claude"


class ToolCallError(Exception):
    """Carries the verbatim text of a failed tool call to the MCP layer.

    The server turns it into a CallToolResult with isError set and the
    exception text as the only content block.
    """


def create_server(timeout_ms: int | None = None) -> Server:
    """Build the MCP server with both mdsel tools registered."""
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
            for tool in TOOL_DEFINITIONS
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = await call_tool(name, arguments, timeout_ms=timeout_ms)
        if result.is_error:
            raise ToolCallError(result.first_text)
        return [types.TextContent(type="text", text=block.text) for block in result.content]

    return server


async def serve(timeout_ms: int | None = None) -> None:
    """Run the server over stdin/stdout until the client disconnects."""
    server = create_server(timeout_ms=timeout_ms)
    debug(f"{SERVER_NAME} {__version__} listening on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
