"""Handlers for the mdsel_index and mdsel_select tools.

Thin wrappers: validate the arguments, build the mdsel argument vector, run
it, and hand the output back untouched. The only text authored here is the
validation error, which never reaches the subprocess.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from mdsel_claude.executor import CommandResult, execute
from mdsel_claude.log import debug
from mdsel_claude.tools.definitions import INDEX_TOOL, SELECT_TOOL
from mdsel_claude.tools.result import ToolInvocationResult

Runner = Callable[..., Awaitable[CommandResult]]


def _validate_files(arguments: Mapping[str, Any]) -> list[str]:
    """Return validation problems with the files argument."""
    files = arguments.get("files")
    if not isinstance(files, list) or not files:
        return ["At least one file path is required"]
    if not all(isinstance(f, str) for f in files):
        return ["File paths must be strings"]
    return []


def _validate_selector(arguments: Mapping[str, Any]) -> list[str]:
    selector = arguments.get("selector")
    if not isinstance(selector, str) or not selector:
        return ["Selector is required"]
    return []


def _validation_error(problems: list[str]) -> ToolInvocationResult:
    return ToolInvocationResult.text(f"Input validation error: {', '.join(problems)}", is_error=True)


def to_tool_result(result: CommandResult) -> ToolInvocationResult:
    """Map a CommandResult to the agent response envelope.

    Success returns stdout verbatim. Failure returns stderr, or stdout when
    stderr is empty.
    """
    if result.succeeded:
        return ToolInvocationResult.text(result.stdout)
    return ToolInvocationResult.text(result.stderr or result.stdout, is_error=True)


async def _run(
    args: list[str],
    run: Runner,
    timeout_ms: int | None,
    abort: asyncio.Event | None,
) -> ToolInvocationResult:
    result = await run(args, timeout_ms=timeout_ms, abort=abort)
    return to_tool_result(result)


async def handle_index(
    arguments: Mapping[str, Any] | None,
    *,
    run: Runner = execute,
    timeout_ms: int | None = None,
    abort: asyncio.Event | None = None,
) -> ToolInvocationResult:
    """Handle an mdsel_index call: `mdsel index <file>...`."""
    arguments = arguments if isinstance(arguments, Mapping) else {}
    problems = _validate_files(arguments)
    if problems:
        return _validation_error(problems)
    return await _run(["index", *arguments["files"]], run, timeout_ms, abort)


async def handle_select(
    arguments: Mapping[str, Any] | None,
    *,
    run: Runner = execute,
    timeout_ms: int | None = None,
    abort: asyncio.Event | None = None,
) -> ToolInvocationResult:
    """Handle an mdsel_select call: `mdsel select <selector> <file>...`.

    The selector always precedes the files.
    """
    arguments = arguments if isinstance(arguments, Mapping) else {}
    problems = _validate_selector(arguments) + _validate_files(arguments)
    if problems:
        return _validation_error(problems)
    return await _run(["select", arguments["selector"], *arguments["files"]], run, timeout_ms, abort)


_HANDLERS = {
    INDEX_TOOL: handle_index,
    SELECT_TOOL: handle_select,
}


async def call_tool(
    name: str,
    arguments: Mapping[str, Any] | None,
    *,
    run: Runner = execute,
    timeout_ms: int | None = None,
    abort: asyncio.Event | None = None,
) -> ToolInvocationResult:
    """Route a tool call by name. Unknown names produce an error result."""
    handler = _HANDLERS.get(name)
    if handler is None:
        return ToolInvocationResult.text(f"Unknown tool: {name}", is_error=True)
    debug(f"tool call {name}")
    return await handler(arguments, run=run, timeout_ms=timeout_ms, abort=abort)
