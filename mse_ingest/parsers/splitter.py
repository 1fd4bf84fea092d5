"""
Record splitter: partitions a text block into top-level raw records.

A single pass over the lines, keyed on leading-tab count:

- A non-blank depth-0 line opens a record. Its title is the text before the
  first ``:`` and its inline value the trimmed text after it.
- Every following line with at least one leading tab is a continuation.
  Exactly one tab is stripped and the line is appended to the record's
  block, so the block is itself a depth-0 text one level down.
- Blank lines are kept only when they sit between two continuation lines of
  the same record (paragraph breaks in free text); blank lines between
  records and at the end of a block are dropped.

Whether a record's value nests is decided here (``RawRecord.has_nesting``):
the inline value must be empty, there must be a block, and every non-blank
depth-0 line of the block must open a record with a canonical title
(lowercase letters, digits, spaces, ``_`` and ``-``). Any other block is a
multi-line scalar. ``RawRecord.is_block`` only says that the value is an
indented block with no inline text; the builder uses it for ``card`` and
``keyword``, which always go to their decoders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from mse_ingest.exceptions import StructuralError
from mse_ingest.parsers.lines import INDENT, classify_line, normalize_newlines, split_title

logger = logging.getLogger(__name__)

MalformedPolicy = Literal["strict", "lenient"]


@dataclass
class RawRecord:
    """One top-level record before value typing.

    Attributes:
        title: Text before the first ``:`` (the whole line for a bare token).
        value: Inline value, followed by the de-indented block if any.
        has_nesting: True if ``value`` is itself a set of records.
        line: 1-based line number of the opening line.
        value_line: 1-based line number of the first line of ``value``.
        bare: True for a lenient-policy token without ``:``.
        is_block: True if the value is only an indented block (no inline text).
    """
    title: str
    value: str
    has_nesting: bool
    line: int
    value_line: int
    bare: bool = False
    is_block: bool = False


@dataclass
class _OpenRecord:
    title: str
    inline: str
    line: int
    bare: bool
    block: list[str] = field(default_factory=list)
    block_line: int | None = None

    def close(self) -> RawRecord:
        if self.block:
            body = "\n".join(self.block)
            value = f"{self.inline}\n{body}" if self.inline else body
        else:
            value = self.inline
        has_nesting = not self.inline and is_record_block(self.block)
        if self.inline or self.block_line is None:
            value_line = self.line
        else:
            value_line = self.block_line
        return RawRecord(
            title=self.title,
            value=value,
            has_nesting=has_nesting,
            line=self.line,
            value_line=value_line,
            bare=self.bare,
            is_block=bool(self.block) and not self.inline,
        )


def is_record_block(block: list[str]) -> bool:
    """True if a de-indented block is shaped as a set of records."""
    if not block:
        return False
    first = classify_line(block[0])
    if not first.has_canonical_title:
        return False
    for line in block[1:]:
        info = classify_line(line)
        if info.is_blank or info.depth > 0:
            continue
        if not info.has_canonical_title:
            return False
    return True


def split_records(
    text: str,
    malformed: MalformedPolicy = "strict",
    line_offset: int = 0,
) -> list[RawRecord]:
    """Split *text* into its top-level records.

    Args:
        text: The text to split. Line endings are normalized first.
        malformed: ``strict`` raises on a depth-0 line without ``:`` (and on
            an indented line before any record); ``lenient`` keeps such a
            line as a bare token and drops orphan indented lines.
        line_offset: Added to reported line numbers, so that records of a
            nested block report positions in the enclosing entry.

    Returns:
        RawRecords in source order.

    Raises:
        StructuralError: On a malformed line under the strict policy.
    """
    lines = normalize_newlines(text).split("\n")
    records: list[RawRecord] = []
    current: _OpenRecord | None = None
    pending_blanks = 0

    for number, raw_line in enumerate(lines, start=1 + line_offset):
        info = classify_line(raw_line)

        if info.is_blank:
            if current is not None and current.block:
                pending_blanks += 1
            continue

        if info.depth > 0:
            if current is None:
                if malformed == "strict":
                    raise StructuralError(
                        "Indented line outside of any record",
                        text=raw_line,
                        line=number,
                    )
                logger.warning("Dropping indented line %d outside of any record", number)
                continue
            if current.block_line is None:
                current.block_line = number
            current.block.extend([""] * pending_blanks)
            pending_blanks = 0
            current.block.append(raw_line[len(INDENT):])
            continue

        # -- depth 0: a new record starts --
        if current is not None:
            records.append(current.close())
        pending_blanks = 0

        if info.opens_record:
            title, inline = split_title(info.body)
            current = _OpenRecord(title=title, inline=inline, line=number, bare=False)
        elif malformed == "strict":
            raise StructuralError(
                "Top-level line has no ':' separator", text=raw_line, line=number
            )
        else:
            logger.warning(
                "Keeping line %d without ':' as a bare token: %r", number, info.body.strip()
            )
            current = _OpenRecord(title=info.body.strip(), inline="", line=number, bare=True)

    if current is not None:
        records.append(current.close())
    return records


def realign_trimmed_block(text: str) -> str:
    """Re-align a body whose first line lost its indentation.

    If the first line opens a record with an inline value and every later
    non-blank line is indented at least once, one tab is stripped from each
    later line. Any other text is returned unchanged (after newline
    normalization).
    """
    lines = normalize_newlines(text).split("\n")
    first = classify_line(lines[0])
    if not first.opens_record or not split_title(first.body)[1]:
        return "\n".join(lines)
    rest = [classify_line(line) for line in lines[1:]]
    non_blank = [info for info in rest if not info.is_blank]
    if not non_blank or any(info.depth == 0 for info in non_blank):
        return "\n".join(lines)
    realigned = [lines[0]]
    for line in lines[1:]:
        realigned.append(line[len(INDENT):] if line.startswith(INDENT) else line)
    return "\n".join(realigned)
