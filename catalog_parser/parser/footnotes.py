"""Footnote extraction.

Runs over the raw text, blank lines included, independently of the main
category loop. A line that is only a (possibly bold) number opens a new
footnote; every following non-blank line is appended to it until the next
number or the end of the text.
"""

from __future__ import annotations

import re

from .models import Footnote


_MARKER_PATTERN = re.compile(r"^\*{0,2}([1-9]\d*)\*{0,2}$")
_DECORATION_PATTERN = re.compile(r"^\*+$")
_BOILERPLATE_PHRASES = ("pass-fail", "grade of", "not allowed", "must complete", "Students must")


def _is_boilerplate(line: str) -> bool:
    return any(phrase in line for phrase in _BOILERPLATE_PHRASES)


def extract_footnotes(text: str) -> list[Footnote]:
    """Collect the numbered footnote block of a catalog page.

    Footnote boilerplate ('pass-fail', 'grade of', ...) seen before any
    numeric marker opens an unnumbered footnote, which is numbered by
    position.

    Args:
        text: The full catalog text.

    Returns:
        Footnotes in source order. Numbers are taken as written and need not
        be contiguous.
    """
    footnotes: list[Footnote] = []
    number: int | None = None
    parts: list[str] = []
    in_footnotes = False

    def flush() -> None:
        if number is not None:
            footnotes.append(Footnote(number=number, text=" ".join(parts)))

    for raw in text.splitlines():
        line = raw.strip()

        marker = _MARKER_PATTERN.match(line)
        if marker:
            flush()
            number = int(marker.group(1))
            parts = []
            in_footnotes = True
            continue

        if not line or _DECORATION_PATTERN.match(line):
            continue
        if in_footnotes:
            if number is not None:
                parts.append(line)
        elif _is_boilerplate(line):
            in_footnotes = True
            number = len(footnotes) + 1
            parts = [line]

    flush()
    return footnotes
