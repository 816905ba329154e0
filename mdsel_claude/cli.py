"""Main CLI entry point for mdsel-claude."""

import asyncio
import json
import sys

import click

from mdsel_claude.config import load_config
from mdsel_claude.gating import decide, is_markdown_path
from mdsel_claude.hooks.read_reminder import read_file_content
from mdsel_claude.tools.handlers import handle_index, handle_select
from mdsel_claude.tools.result import ToolInvocationResult
from mdsel_claude.word_count import count_words

timeout_option = click.option(
    "--timeout-ms",
    type=int,
    default=None,
    help="Kill mdsel after this many milliseconds (default: 30000)",
)
json_option = click.option("--json", "output_json", is_flag=True, help="Output the tool result envelope as JSON")


def _emit(result: ToolInvocationResult, output_json: bool = False) -> None:
    """Write tool output verbatim and exit non-zero on error."""
    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.is_error:
            sys.exit(1)
        return
    if result.is_error:
        click.echo(result.first_text, err=True, nl=False)
        sys.exit(1)
    click.echo(result.first_text, nl=False)


@click.group()
@click.version_option(package_name="mdsel-claude")
def cli() -> None:
    """Selector-based Markdown access for coding agents."""
    pass


@cli.command("index")
@click.argument("files", nargs=-1, required=True)
@timeout_option
@json_option
def index_cmd(files: tuple[str, ...], timeout_ms: int | None, output_json: bool) -> None:
    """Print the mdsel selector inventory for FILES.

    Examples:

        mdsel-claude index README.md docs/guide.md

        mdsel-claude index --json README.md
    """
    _emit(asyncio.run(handle_index({"files": list(files)}, timeout_ms=timeout_ms)), output_json)


@cli.command("select")
@click.argument("selector")
@click.argument("files", nargs=-1, required=True)
@timeout_option
@json_option
def select_cmd(selector: str, files: tuple[str, ...], timeout_ms: int | None, output_json: bool) -> None:
    """Print the content matching SELECTOR in FILES.

    Examples:

        mdsel-claude select h2.0 README.md

        mdsel-claude select "h2.0/code.0" README.md
    """
    result = asyncio.run(handle_select({"selector": selector, "files": list(files)}, timeout_ms=timeout_ms))
    _emit(result, output_json)


@cli.command("check")
@click.argument("file_path")
def check_cmd(file_path: str) -> None:
    """Show whether reading FILE_PATH would trigger the mdsel reminder."""
    content = read_file_content(file_path)
    if content is None:
        click.echo(f"Error: cannot read {file_path}", err=True)
        sys.exit(1)

    config = load_config()
    decision = decide(file_path, content, config)
    click.echo(f"File: {file_path}")
    click.echo(f"Markdown: {'yes' if is_markdown_path(file_path) else 'no'}")
    click.echo(f"Words: {count_words(content)}")
    click.echo(f"Threshold: {config.min_words}")
    click.echo(f"Reminder: {'yes' if decision.should_remind else 'no'}")
    if decision.reminder_text:
        click.echo("")
        click.echo(decision.reminder_text)


@cli.command("serve")
@timeout_option
def serve_cmd(timeout_ms: int | None) -> None:
    """Run the MCP server (mdsel_index, mdsel_select) on stdio."""
    from mdsel_claude.server import serve  # noqa: PLC0415

    asyncio.run(serve(timeout_ms=timeout_ms))


@cli.group()
def hook() -> None:
    """Claude Code hook commands."""
    pass


@hook.command("read-reminder")
def hook_read_reminder() -> None:
    """Remind the agent to use mdsel when it reads a large Markdown file.

    Reads a PreToolUse or PostToolUse event from stdin. Always exits 0.
    """
    from mdsel_claude.hooks.read_reminder import main as hook_main  # noqa: PLC0415

    hook_main()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
