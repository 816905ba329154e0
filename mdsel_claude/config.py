"""Gating configuration loaded from the process environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

MIN_WORDS_ENV = "MDSEL_MIN_WORDS"
DEFAULT_MIN_WORDS = 200

# Leading ASCII integer, trailing text ignored ("300words" -> 300)
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class GatingConfig:
    """Word count threshold above which Markdown reads trigger a reminder."""

    min_words: int = DEFAULT_MIN_WORDS


def parse_min_words(value: str | None) -> int:
    """Parse a base-10 threshold, falling back to the default.

    Zero and negative numbers are valid thresholds. Only absent, empty or
    non-numeric values fall back to DEFAULT_MIN_WORDS.
    """
    if not value:
        return DEFAULT_MIN_WORDS
    match = _LEADING_INT.match(value)
    if match is None:
        return DEFAULT_MIN_WORDS
    return int(match.group(1), 10)


def load_config(environ: Mapping[str, str] | None = None) -> GatingConfig:
    """Read the gating threshold from the environment.

    Not cached: every call looks at the environment as it is right now.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        GatingConfig with the effective min_words threshold.
    """
    env = os.environ if environ is None else environ
    return GatingConfig(min_words=parse_min_words(env.get(MIN_WORDS_ENV)))
