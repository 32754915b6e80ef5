"""
core/formatting.py
------------------
Text helpers for the conversion report: word wrapping, section headings
and percentage rendering.

All writers take a text sink ``w`` (anything with a ``write(str)`` method,
e.g. an open file or :class:`io.StringIO`).
"""
from __future__ import annotations

from typing import TextIO

_HEADING_RULE = "-" * 28


def justify_lines(w: TextIO, s: str, limit: int, indent: int) -> None:
    """
    Write *s* to *w*, breaking between words to keep lines within *limit*.

    Continuation lines are indented by *indent* spaces.  Only spaces
    separate words: newlines and tabs inside *s* are written as-is and do
    not reset the line length.  A single word longer than *limit* is never
    broken.
    """
    n = 0
    start_of_line = True
    for word in s.split(" "):
        # A trailing newline ends the line; it takes up no column.
        width = len(word.rstrip("\n"))
        if not start_of_line and n + 1 + width > limit:
            w.write("\n")
            w.write(" " * indent)
            n = indent
            start_of_line = True
        if start_of_line:
            w.write(word)
            n += width
        else:
            w.write(" " + word)
            n += width + 1
        start_of_line = False


def write_heading(w: TextIO, title: str) -> None:
    w.write(f"{_HEADING_RULE}\n{title}\n{_HEADING_RULE}\n")


def pct(total: int, bad: int) -> str:
    """
    Render (total - bad) / total as a percentage.

    Precision grows as the result approaches 100 so that a handful of bad
    rows in a large table is still visible: 5 decimals above 99.9, 3
    decimals above 95, none otherwise.  Exactly ``"100"`` when nothing is
    bad or there is nothing at all.

    Examples::

        pct(100, 0)     → "100"
        pct(100, 5)     → "95"
        pct(1000, 10)   → "99.000"
        pct(10**6, 1)   → "99.99990"
    """
    if bad == 0 or total == 0:
        return "100"
    p = 100.0 * (total - bad) / total
    if p > 99.9:
        return f"{p:2.5f}"
    if p > 95.0:
        return f"{p:2.3f}"
    return f"{p:2.0f}"
