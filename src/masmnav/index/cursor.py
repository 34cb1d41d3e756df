"""Cursor context: the word under the cursor and whether it is navigable."""

from __future__ import annotations

import re
from dataclasses import dataclass

WORD_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
COMMENT_MARKER = "#"


@dataclass(frozen=True, slots=True)
class WordAt:
    """Identifier under the cursor and its span in the line."""

    text: str
    start: int
    end: int

    def before(self, line: str) -> str:
        return line[: self.start]

    def prefix(self, line: str) -> str:
        """Line text up to and including the word."""
        return line[: self.end]


def word_at(line: str, column: int) -> WordAt | None:
    """Identifier containing ``column``; a cursor just past a word counts.

    >>> word_at("exec.mem::load", 10)
    WordAt(text='load', start=10, end=14)
    >>> word_at("exec.mem::load", 14)
    WordAt(text='load', start=10, end=14)
    >>> word_at("  ", 1)
    """
    for m in WORD_RE.finditer(line):
        if m.start() <= column <= m.end():
            return WordAt(m.group(0), m.start(), m.end())
        if m.start() > column:
            break
    return None


def in_comment_or_string(before: str) -> bool:
    """True if text ending at a word puts it in a comment or an open string."""
    return COMMENT_MARKER in before or before.count('"') % 2 == 1
