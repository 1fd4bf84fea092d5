"""
Keyword decoder.

Keyword records have a closed field set: ``keyword``, ``match``, ``mode``
and ``reminder``. Any other title is dropped (logged at DEBUG), unlike card
records which keep unknown titles.
"""

from __future__ import annotations

import logging

from mse_ingest.models import KeywordRecord
from mse_ingest.parsers.splitter import MalformedPolicy, realign_trimmed_block, split_records

logger = logging.getLogger(__name__)

_KEYWORD_FIELDS = ("keyword", "match", "mode", "reminder")


def decode_keyword(
    raw_value: str,
    malformed: MalformedPolicy = "strict",
    line_offset: int = 0,
    realign: bool = True,
) -> KeywordRecord:
    """Decode the body of one ``keyword`` record.

    With *realign*, a body whose first line lost its indentation is
    re-aligned first, as for ``decode_card()``.

    Raises:
        StructuralError: On a malformed line under the strict policy.
    """
    keyword = KeywordRecord()
    body = realign_trimmed_block(raw_value) if realign else raw_value
    for record in split_records(body, malformed, line_offset):
        if record.title in _KEYWORD_FIELDS:
            setattr(keyword, record.title, record.value)
        else:
            logger.debug(
                "Ignoring unknown keyword title '%s' at line %d", record.title, record.line
            )
    return keyword
