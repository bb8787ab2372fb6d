"""Helpers turning raw track filenames and times into display strings."""

from __future__ import annotations

import math
import re

from albumdeck.library import AUDIO_EXTENSIONS

UNKNOWN_TITLE = "Unknown Title"

# Tag segments such as "[NCS Release] - " are dropped up to the first hyphen.
_BRACKET_PREFIX = re.compile(r"\[.*?-")

_MAX_WORDS = 3


def _strip_extension(name: str) -> str:
    stem, dot, ext = name.rpartition(".")
    if dot and f".{ext.lower()}" in AUDIO_EXTENSIONS:
        return stem
    return name


def normalize_title(filename: str) -> str:
    """Return a short human-readable title for *filename*.

    Never raises; degenerate input yields ``"Unknown Title"``.

    Example: ``"[ncs-] Tobu Hope Original Mix.mp3"`` → ``"Tobu Hope Original"``
    """
    name = _BRACKET_PREFIX.sub("", filename, count=1)
    name = _strip_extension(name).strip()
    title = " ".join(name.split(" ")[:_MAX_WORDS])
    return title or UNKNOWN_TITLE


def format_time(seconds: float) -> str:
    """Format *seconds* as ``MM:SS``; unknown or negative values give ``00:00``."""
    if seconds is None or math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return "00:00"
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes:02d}:{remaining:02d}"
