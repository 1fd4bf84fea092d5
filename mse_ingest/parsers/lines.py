"""
Line classification for the indentation-delimited set format.

One tab character is one nesting level. A line at depth 0 that contains a
``:`` opens a new record; depth-0 lines without one are malformed wherever a
record is expected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Record titles as the format writes them: lowercase words, digits, spaces
_TITLE_PATTERN = re.compile(r"[a-z0-9][a-z0-9 _\-]*$")

INDENT = "\t"


@dataclass(frozen=True)
class LineInfo:
    """Classification of one logical line.

    Attributes:
        depth: Number of leading tab characters.
        body: The line with its leading tabs removed.
        is_blank: True if the line holds only whitespace.
    """
    depth: int
    body: str
    is_blank: bool

    @property
    def opens_record(self) -> bool:
        """True for a non-blank depth-0 line with a ``:`` separator."""
        return self.depth == 0 and not self.is_blank and ":" in self.body

    @property
    def has_canonical_title(self) -> bool:
        """True if the line opens a record whose title is in canonical key form."""
        if not self.opens_record:
            return False
        title = self.body.split(":", 1)[0].strip()
        return bool(_TITLE_PATTERN.match(title))


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF and drop a leading BOM."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def classify_line(line: str) -> LineInfo:
    """Count leading tabs and classify a single line (without its newline)."""
    depth = len(line) - len(line.lstrip(INDENT))
    body = line[depth:]
    return LineInfo(depth=depth, body=body, is_blank=not body.strip())


def split_title(body: str) -> tuple[str, str]:
    """Split a record line body at its first ``:`` into (title, inline value)."""
    title, _, value = body.partition(":")
    return title.strip(), value.strip()
