"""
Card decoder.

A card body is record-shaped. Fixed titles map onto CardRecord fields; every
other title lands in the generic field bag as text, which is how cards of
any game are read without knowing that game's card fields.

| Title           | Handling                                          |
|-----------------|---------------------------------------------------|
| ``styling data``| nested store, built by the recursive builder      |
| ``notes``       | kept verbatim                                     |
| ``time created``| exact timestamp, FormatError on mismatch          |
| ``time modified``| exact timestamp, FormatError on mismatch         |
| anything else   | appended to ``fields`` as the raw text            |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mse_ingest.exceptions import StructuralError
from mse_ingest.models import CardRecord
from mse_ingest.parsers.scalars import parse_timestamp
from mse_ingest.parsers.splitter import RawRecord, realign_trimmed_block, split_records
from mse_ingest.store import KeyValueStore

if TYPE_CHECKING:
    from mse_ingest.parsers.builder import StructureBuilder

logger = logging.getLogger(__name__)


def decode_card(
    raw_value: str,
    builder: StructureBuilder | None = None,
    depth: int = 1,
    line_offset: int = 0,
    realign: bool = True,
) -> CardRecord:
    """Decode the body of one ``card`` record.

    Args:
        raw_value: The card's de-indented body.
        builder: Builder used for ``styling data`` and for parser policies.
            A default builder is created when omitted.
        depth: Nesting level of the card body within its entry.
        line_offset: Line number of the line before the body, for positions.
        realign: Re-align a body whose first line lost its indentation (see
            ``realign_trimmed_block``). The builder passes bodies it has
            already de-indented and turns this off.

    Returns:
        The decoded CardRecord.

    Raises:
        FormatError: If ``time created`` / ``time modified`` is malformed, or
            a color inside ``styling data`` is.
        StructuralError: On a malformed line or excessive nesting.
    """
    if builder is None:
        from mse_ingest.parsers.builder import StructureBuilder

        builder = StructureBuilder()
    builder.check_depth(depth, line=line_offset + 1, title="card")

    card = CardRecord()
    body = realign_trimmed_block(raw_value) if realign else raw_value
    for record in split_records(body, builder.config.malformed_lines, line_offset):
        if record.title == "styling data":
            card.styling_data = _decode_styling(record, builder, depth)
        elif record.title == "notes":
            card.notes = record.value
        elif record.title == "time created":
            card.date_created = parse_timestamp(
                record.value, line=record.value_line, title=record.title
            )
        elif record.title == "time modified":
            card.date_modified = parse_timestamp(
                record.value, line=record.value_line, title=record.title
            )
        else:
            card.fields.append(record.title, record.value)
    return card


def _decode_styling(record: RawRecord, builder: StructureBuilder, depth: int) -> KeyValueStore:
    if record.has_nesting:
        return builder.build_store(record.value, depth + 1, record.value_line - 1)
    if not record.value.strip():
        return KeyValueStore()
    raise StructuralError(
        "'styling data' must be an indented block",
        text=record.value,
        line=record.value_line,
        title=record.title,
    )
