"""Shared fixtures: stub mdsel executables backed by small Python scripts."""

import stat
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def make_stub(tmp_path: Path) -> Callable[[str], str]:
    """Create an executable script standing in for mdsel.

    Returns a factory taking the Python body of the script and returning its path.
    """
    counter = iter(range(1000))

    def _make(body: str) -> str:
        script = tmp_path / f"mdsel-stub-{next(counter)}"
        script.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the tests."""
    for name in ("MDSEL_MIN_WORDS", "MDSEL_PATH", "MDSEL_DEBUG"):
        monkeypatch.delenv(name, raising=False)
