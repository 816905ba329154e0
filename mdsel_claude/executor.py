"""Run the mdsel CLI as a subprocess and capture its output verbatim.

Every expected failure (missing executable, nonzero exit, timeout, abort) is
reported through CommandResult.succeeded instead of an exception. Output is
never parsed or rewritten.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from dataclasses import dataclass

from mdsel_claude.log import debug, log

MDSEL_PATH_ENV = "MDSEL_PATH"

DEFAULT_TIMEOUT_MS = 30000

# Seconds between SIGTERM and SIGKILL
KILL_GRACE_SECONDS = 5.0

_CHUNK_SIZE = 64 * 1024

# Escalation tasks outliving a cancelled execute() call
_PENDING_KILLS: set[asyncio.Task] = set()


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one mdsel invocation."""

    succeeded: bool
    stdout: str = ""
    stderr: str = ""
    # None when the process never started or was ended by a signal
    exit_code: int | None = None
    timed_out: bool = False
    aborted: bool = False


def resolve_executable() -> str:
    """Locate the mdsel executable.

    MDSEL_PATH wins, then mdsel on PATH, then the bare name (which lets the
    spawn fail with a not-found result).
    """
    return os.environ.get(MDSEL_PATH_ENV) or shutil.which("mdsel") or "mdsel"


def _spawn_error_message(program: str, cwd: str | None, error: Exception) -> str:
    if isinstance(error, FileNotFoundError):
        if cwd is not None and not os.path.isdir(cwd):
            return f"Working directory not found: {cwd}"
        return f"mdsel CLI not found at {program}. Install with: npm install -g mdsel"
    if isinstance(error, PermissionError):
        return f"Permission denied running mdsel at {program}"
    return f"Failed to start mdsel at {program}: {error}"


async def _drain(stream: asyncio.StreamReader, chunks: list[bytes]) -> None:
    """Append chunks from stream in arrival order until EOF."""
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        chunks.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    # Join before decoding so multi-byte characters split across chunks survive
    return b"".join(chunks).decode("utf-8", errors="replace")


def _kill(proc: asyncio.subprocess.Process, graceful: bool) -> None:
    try:
        if graceful:
            proc.terminate()
        else:
            proc.kill()
    except ProcessLookupError:
        pass


async def _escalate(proc: asyncio.subprocess.Process, collector: asyncio.Future) -> None:
    """SIGKILL an already SIGTERMed process that outlives the grace window."""
    done, _ = await asyncio.wait({collector}, timeout=KILL_GRACE_SECONDS)
    if done:
        return

    _kill(proc, graceful=False)
    done, _ = await asyncio.wait({collector}, timeout=KILL_GRACE_SECONDS)
    if not done:
        # A grandchild still holds the pipes open; stop reading them
        collector.cancel()


async def _terminate(proc: asyncio.subprocess.Process, collector: asyncio.Future) -> None:
    """SIGTERM the process, escalating to SIGKILL after the grace window."""
    _kill(proc, graceful=True)
    await _escalate(proc, collector)


def _consume_result(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


async def execute(
    args: list[str],
    *,
    timeout_ms: int | None = None,
    cwd: str | None = None,
    abort: asyncio.Event | None = None,
    executable: str | None = None,
) -> CommandResult:
    """Run mdsel with an argument vector and collect its output.

    Args:
        args: Arguments after the executable, e.g. ["index", "README.md"].
            Passed as a vector, never through a shell.
        timeout_ms: Kill the process after this many milliseconds.
            Defaults to DEFAULT_TIMEOUT_MS.
        cwd: Working directory for the process.
        abort: Cancellation signal. Setting it terminates the process.
        executable: Program to run instead of the resolved mdsel binary.

    Returns:
        CommandResult. Resolves for every expected failure mode. If the
        awaiting task itself is cancelled, the process gets SIGTERM, the
        cancellation propagates and SIGKILL follows in the background once
        the grace window runs out.
    """
    program = executable or resolve_executable()
    command = args[0] if args else ""
    timeout_s = (DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms) / 1000.0

    if abort is not None and abort.is_set():
        return CommandResult(succeeded=False, stderr="mdsel command aborted before start", aborted=True)

    debug(f"spawning {program} {args!r} (timeout {timeout_s}s)")
    try:
        proc = await asyncio.create_subprocess_exec(
            program,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except (OSError, ValueError) as e:
        message = _spawn_error_message(program, cwd, e)
        debug(message)
        return CommandResult(succeeded=False, stderr=message)

    stdout_chunks: list[bytes] = []
    stderr_chunks: list[bytes] = []
    collector = asyncio.ensure_future(
        asyncio.gather(
            _drain(proc.stdout, stdout_chunks),
            _drain(proc.stderr, stderr_chunks),
            proc.wait(),
        )
    )
    collector.add_done_callback(_consume_result)
    waiters: set[asyncio.Future] = {collector}
    abort_waiter: asyncio.Future | None = None
    if abort is not None:
        abort_waiter = asyncio.ensure_future(abort.wait())
        waiters.add(abort_waiter)

    timed_out = False
    aborted = False
    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout_s, return_when=asyncio.FIRST_COMPLETED)
        if collector not in done:
            if abort_waiter is not None and abort_waiter in done:
                aborted = True
                log(f"mdsel {command} aborted, terminating pid {proc.pid}")
            else:
                timed_out = True
                log(f"mdsel {command} timed out after {timeout_s:g}s, terminating pid {proc.pid}")
            await _terminate(proc, collector)
    except asyncio.CancelledError:
        _kill(proc, graceful=True)
        reaper = asyncio.ensure_future(_escalate(proc, collector))
        _PENDING_KILLS.add(reaper)
        reaper.add_done_callback(_PENDING_KILLS.discard)
        raise
    finally:
        if abort_waiter is not None:
            abort_waiter.cancel()

    stdout = _decode(stdout_chunks)
    stderr = _decode(stderr_chunks)

    read_error = None
    if collector.done() and not collector.cancelled():
        read_error = collector.exception()

    if timed_out or aborted:
        if not stderr:
            stderr = "mdsel command aborted" if aborted else f"mdsel command timed out after {timeout_s:g}s"
        return CommandResult(
            succeeded=False,
            stdout=stdout,
            stderr=stderr,
            timed_out=timed_out,
            aborted=aborted,
        )

    if read_error is not None:
        return CommandResult(
            succeeded=False,
            stdout=stdout,
            stderr=stderr or f"Failed reading mdsel output: {read_error}",
        )

    exit_code = proc.returncode
    if exit_code is not None and exit_code < 0:
        # Negative return codes mean the process died from a signal
        exit_code = None
    debug(f"mdsel {command} exited with {proc.returncode}")
    return CommandResult(
        succeeded=exit_code == 0,
        stdout=stdout,
        stderr=stderr,
        exit_code=exit_code,
    )
