"""Tests for the mdsel_index and mdsel_select tool handlers."""

import asyncio
import functools
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import pytest

from mdsel_claude.executor import CommandResult, execute
from mdsel_claude.tools.definitions import INDEX_TOOL, SELECT_TOOL, TOOL_DEFINITIONS
from mdsel_claude.tools.handlers import call_tool, handle_index, handle_select, to_tool_result
from mdsel_claude.tools.result import TextContent, ToolInvocationResult

INDEX_OUTPUT = "h1.0 Title\n---\ncode:1 para:2\n"


class FakeRunner:
    """Records executor calls and returns a canned CommandResult."""

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    async def __call__(self, args: list[str], **kwargs: Any) -> CommandResult:
        self.calls.append((args, kwargs))
        return self.result


@pytest.fixture
def ok_runner() -> FakeRunner:
    return FakeRunner(CommandResult(succeeded=True, stdout=INDEX_OUTPUT, exit_code=0))


# =============================================================================
# Tests for to_tool_result() - output mapping
# =============================================================================


class TestToToolResult:
    """Tests for CommandResult -> ToolInvocationResult mapping."""

    def test_success_uses_stdout(self) -> None:
        """Success returns stdout verbatim, ignoring stderr."""
        result = to_tool_result(CommandResult(succeeded=True, stdout="out", stderr="warning", exit_code=0))
        assert result == ToolInvocationResult(content=[TextContent(text="out")], is_error=False)

    def test_failure_prefers_stderr(self) -> None:
        """Failure returns stderr when present."""
        result = to_tool_result(CommandResult(succeeded=False, stdout="out", stderr="boom", exit_code=1))
        assert result.is_error is True
        assert result.first_text == "boom"

    def test_failure_falls_back_to_stdout(self) -> None:
        """Failure with empty stderr returns stdout."""
        result = to_tool_result(CommandResult(succeeded=False, stdout="details", stderr="", exit_code=2))
        assert result.is_error is True
        assert result.first_text == "details"

    def test_empty_success(self) -> None:
        """Empty output on success is returned as an empty text block."""
        result = to_tool_result(CommandResult(succeeded=True, exit_code=0))
        assert result.to_dict() == {"content": [{"type": "text", "text": ""}], "isError": False}


# =============================================================================
# Tests for handle_index()
# =============================================================================


class TestHandleIndex:
    """Tests for handle_index()."""

    @pytest.mark.asyncio
    async def test_verbatim_output(self, ok_runner: FakeRunner) -> None:
        """Stdout comes back byte-identical with isError False."""
        result = await handle_index({"files": ["README.md"]}, run=ok_runner)
        assert result.to_dict() == {"content": [{"type": "text", "text": INDEX_OUTPUT}], "isError": False}

    @pytest.mark.asyncio
    async def test_argument_vector(self, ok_runner: FakeRunner) -> None:
        """Arguments are ["index", *files]."""
        await handle_index({"files": ["a.md", "b.md"]}, run=ok_runner)
        assert [args for args, _ in ok_runner.calls] == [["index", "a.md", "b.md"]]

    @pytest.mark.asyncio
    async def test_forwards_timeout_and_abort(self, ok_runner: FakeRunner) -> None:
        """timeout_ms and abort reach the executor."""
        abort = asyncio.Event()
        await handle_index({"files": ["a.md"]}, run=ok_runner, timeout_ms=1234, abort=abort)
        _, kwargs = ok_runner.calls[0]
        assert kwargs == {"timeout_ms": 1234, "abort": abort}

    @pytest.mark.asyncio
    async def test_failure_passthrough(self) -> None:
        """Tool errors are passed through with isError True."""
        runner = FakeRunner(CommandResult(succeeded=False, stderr="Error: FILE_NOT_FOUND\n", exit_code=1))
        result = await handle_index({"files": ["missing.md"]}, run=runner)
        assert result.is_error is True
        assert result.first_text == "Error: FILE_NOT_FOUND\n"

    @pytest.mark.parametrize(
        "arguments",
        [{}, None, {"files": []}, {"files": "a.md"}, {"files": [1]}, ["a.md"]],
    )
    @pytest.mark.asyncio
    async def test_invalid_input(self, ok_runner: FakeRunner, arguments: Any) -> None:
        """Invalid files never reach the executor."""
        result = await handle_index(arguments, run=ok_runner)
        assert result.is_error is True
        assert result.first_text.startswith("Input validation error:")
        assert ok_runner.calls == []

    @pytest.mark.asyncio
    async def test_empty_path_reaches_mdsel(self, ok_runner: FakeRunner) -> None:
        """An empty path string is passed on for mdsel to report."""
        result = await handle_index({"files": [""]}, run=ok_runner)
        assert result.is_error is False
        assert ok_runner.calls[0][0] == ["index", ""]


# =============================================================================
# Tests for handle_select()
# =============================================================================


class TestHandleSelect:
    """Tests for handle_select()."""

    @pytest.mark.asyncio
    async def test_selector_precedes_files(self, ok_runner: FakeRunner) -> None:
        """Arguments are ["select", selector, *files]."""
        await handle_select({"selector": "h2.0/code.0", "files": ["a.md", "b.md"]}, run=ok_runner)
        assert ok_runner.calls[0][0] == ["select", "h2.0/code.0", "a.md", "b.md"]

    @pytest.mark.asyncio
    async def test_verbatim_output(self) -> None:
        """Selected content is returned unchanged."""
        content = "## Install\n\n```bash\nnpm i -g mdsel\n```\n"
        runner = FakeRunner(CommandResult(succeeded=True, stdout=content, exit_code=0))
        result = await handle_select({"selector": "h2.0", "files": ["a.md"]}, run=runner)
        assert result.first_text == content
        assert result.is_error is False

    @pytest.mark.asyncio
    async def test_missing_selector(self, ok_runner: FakeRunner) -> None:
        """A missing or empty selector is a validation error."""
        for arguments in ({"files": ["a.md"]}, {"selector": "", "files": ["a.md"]}, {"selector": 3, "files": ["a.md"]}):
            result = await handle_select(arguments, run=ok_runner)
            assert result.is_error is True
            assert "Selector is required" in result.first_text
        assert ok_runner.calls == []

    @pytest.mark.asyncio
    async def test_reports_all_problems(self, ok_runner: FakeRunner) -> None:
        """Selector and files problems are reported together."""
        result = await handle_select({}, run=ok_runner)
        assert result.first_text == "Input validation error: Selector is required, At least one file path is required"

    @pytest.mark.asyncio
    async def test_empty_files_never_spawns(self) -> None:
        """select with files=[] errors without spawning a subprocess."""
        with patch("mdsel_claude.executor.asyncio.create_subprocess_exec") as spawn:
            result = await handle_select({"selector": "h1.0", "files": []})
        assert result.is_error is True
        assert spawn.call_count == 0


# =============================================================================
# Tests for call_tool() routing
# =============================================================================


class TestCallTool:
    """Tests for call_tool() dispatch."""

    @pytest.mark.asyncio
    async def test_routes_index(self, ok_runner: FakeRunner) -> None:
        """mdsel_index goes to handle_index."""
        await call_tool(INDEX_TOOL, {"files": ["a.md"]}, run=ok_runner)
        assert ok_runner.calls[0][0] == ["index", "a.md"]

    @pytest.mark.asyncio
    async def test_routes_select(self, ok_runner: FakeRunner) -> None:
        """mdsel_select goes to handle_select."""
        await call_tool(SELECT_TOOL, {"selector": "code.0", "files": ["a.md"]}, run=ok_runner)
        assert ok_runner.calls[0][0] == ["select", "code.0", "a.md"]

    @pytest.mark.asyncio
    async def test_unknown_tool(self, ok_runner: FakeRunner) -> None:
        """Unknown tool names produce an error result."""
        result = await call_tool("mdsel_delete", {"files": ["a.md"]}, run=ok_runner)
        assert result.to_dict() == {
            "content": [{"type": "text", "text": "Unknown tool: mdsel_delete"}],
            "isError": True,
        }
        assert ok_runner.calls == []

    def test_definitions_cover_handlers(self) -> None:
        """Every listed tool has a schema requiring files."""
        assert [tool["name"] for tool in TOOL_DEFINITIONS] == [INDEX_TOOL, SELECT_TOOL]
        for tool in TOOL_DEFINITIONS:
            assert "files" in tool["inputSchema"]["required"]
            assert tool["inputSchema"]["properties"]["files"]["minItems"] == 1


# =============================================================================
# End-to-end through a real subprocess
# =============================================================================


class TestHandlersWithSubprocess:
    """Handlers backed by the real executor and a stub mdsel."""

    @pytest.mark.asyncio
    async def test_index_roundtrip(self, make_stub: Callable[[str], str]) -> None:
        """The stub's exact stdout comes back from mdsel_index."""
        stub = make_stub(f"import sys\nsys.stdout.write({INDEX_OUTPUT!r})\n")
        result = await handle_index({"files": ["README.md"]}, run=functools.partial(execute, executable=stub))
        assert result.first_text == INDEX_OUTPUT
        assert result.is_error is False

    @pytest.mark.asyncio
    async def test_select_failure_roundtrip(self, make_stub: Callable[[str], str]) -> None:
        """The stub's stderr comes back from a failed mdsel_select."""
        stub = make_stub('import sys\nsys.stderr.write("Unresolved selector: h9.0\\n")\nsys.exit(1)\n')
        result = await handle_select(
            {"selector": "h9.0", "files": ["README.md"]}, run=functools.partial(execute, executable=stub)
        )
        assert result.is_error is True
        assert result.first_text == "Unresolved selector: h9.0\n"

    @pytest.mark.asyncio
    async def test_missing_binary(self, tmp_path: Any) -> None:
        """A missing mdsel binary surfaces as an error result, not an exception."""
        run = functools.partial(execute, executable=str(tmp_path / "absent"))
        result = await handle_index({"files": ["README.md"]}, run=run)
        assert result.is_error is True
        assert "not found" in result.first_text
