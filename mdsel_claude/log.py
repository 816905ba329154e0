"""Stderr logging helpers.

stdout belongs to protocol output (hook JSON, MCP frames, raw mdsel output),
so every diagnostic goes to stderr.
"""

import os
import sys

DEBUG_ENV = "MDSEL_DEBUG"


def log(message: str) -> None:
    """Print message to stderr."""
    print(message, file=sys.stderr)


def debug(message: str) -> None:
    """Print message to stderr only when MDSEL_DEBUG is set."""
    if os.environ.get(DEBUG_ENV):
        log(f"[mdsel-claude] {message}")
