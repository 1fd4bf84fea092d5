"""
Recursive structure builder.

Turns one text block into a KeyValueStore:

1. ``split_records()`` partitions the block into raw records.
2. Each record is typed:
   - titles listed in ``raw_text_titles`` keep their value verbatim;
   - flat values go through ``classify_scalar()``;
   - ``card`` / ``keyword`` blocks go to their decoders, record-shaped or
     not, so a malformed body line fails only that record;
   - any other nested block recurses into a child store.

Depth is counted from the entry root (0) and capped by
``ParserConfig.max_depth``; going deeper raises StructuralError instead of
exhausting the interpreter stack.

Failures inside one card or keyword record are scoped by
``ParserConfig.record_errors``: under ``skip`` the record is dropped, the
error is logged and kept in ``StructureBuilder.skipped``, and sibling
records continue to decode.
"""

from __future__ import annotations

import logging
from typing import Callable

from mse_ingest.config import ParserConfig
from mse_ingest.exceptions import DecodeError, StructuralError
from mse_ingest.models import KeywordRecord
from mse_ingest.parsers.card import decode_card
from mse_ingest.parsers.keyword import decode_keyword
from mse_ingest.parsers.scalars import classify_scalar
from mse_ingest.parsers.splitter import RawRecord, split_records
from mse_ingest.store import KeyValueStore
from mse_ingest.values import TypedValue

logger = logging.getLogger(__name__)

CARD_TITLE = "card"
KEYWORD_TITLE = "keyword"


class StructureBuilder:
    """Recursive decoder for the indentation-delimited text format.

    A builder holds no state shared between entries apart from the list of
    skipped record errors, so use one builder per decoded entry.

    Attributes:
        config: Parser policies.
        skipped: DecodeErrors of card / keyword records dropped under
            ``record_errors="skip"``, in encounter order.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()
        self.skipped: list[DecodeError] = []
        self._raw_titles = frozenset(self.config.raw_text_titles)

    def parse(self, text: str) -> KeyValueStore:
        """Decode the full text of one entry into its root store."""
        return self.build_store(text, depth=0, line_offset=0)

    def check_depth(self, depth: int, line: int | None = None, title: str | None = None) -> None:
        """Raise StructuralError if *depth* exceeds ``max_depth``."""
        if depth > self.config.max_depth:
            raise StructuralError(
                f"Nesting exceeds max_depth={self.config.max_depth}",
                line=line,
                title=title,
            )

    def build_store(self, text: str, depth: int, line_offset: int = 0) -> KeyValueStore:
        """Split *text* into records and type each one into a new store."""
        self.check_depth(depth, line=line_offset + 1)
        store = KeyValueStore()
        for record in split_records(text, self.config.malformed_lines, line_offset):
            value = self.build_value(record, depth)
            if value is not None:
                store.append(record.title, value)
        return store

    def build_value(self, record: RawRecord, depth: int) -> TypedValue | None:
        """Type one raw record found at *depth*.

        Returns ``None`` only for a card / keyword record skipped under
        ``record_errors="skip"``.
        """
        if record.title in self._raw_titles:
            return record.value

        child_depth = depth + 1
        line_offset = record.value_line - 1
        # card / keyword blocks reach their decoder whatever their shape
        if record.is_block and record.title == CARD_TITLE:
            return self._decode_scoped(
                record,
                lambda: decode_card(
                    record.value, self, child_depth, line_offset, realign=False
                ),
            )
        if record.is_block and record.title == KEYWORD_TITLE:
            return self._decode_scoped(
                record,
                lambda: self._decode_keyword(record, child_depth, line_offset),
            )
        if not record.has_nesting:
            return classify_scalar(record.value, line=record.value_line, title=record.title)
        try:
            return self.build_store(record.value, child_depth, line_offset)
        except StructuralError as exc:
            if exc.title is None:
                exc.title = record.title
            raise

    # -- Private helpers ----------------------------------------------------

    def _decode_keyword(self, record: RawRecord, depth: int, line_offset: int) -> KeywordRecord:
        self.check_depth(depth, line=record.value_line, title=record.title)
        return decode_keyword(
            record.value, self.config.malformed_lines, line_offset, realign=False
        )

    def _decode_scoped(self, record: RawRecord, decode: Callable[[], TypedValue]) -> TypedValue | None:
        try:
            return decode()
        except DecodeError as exc:
            if self.config.record_errors == "raise":
                raise
            logger.warning(
                "Skipping '%s' record at line %d: %s", record.title, record.line, exc
            )
            self.skipped.append(exc)
            return None


def parse_text(text: str, config: ParserConfig | None = None) -> KeyValueStore:
    """Decode the text of one entry with a fresh builder.

    Card / keyword records skipped under ``record_errors="skip"`` are only
    logged; use ``StructureBuilder`` directly to inspect them.

    Raises:
        StructuralError: On broken structure outside a scoped record.
        FormatError: On a malformed fixed-type literal outside a scoped record.
    """
    return StructureBuilder(config).parse(text)
