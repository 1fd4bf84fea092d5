"""
Record types produced by the decoders and the assembled set aggregate.

- CardRecord: One ``card`` block. Fixed fields (notes, creation and
  modification timestamps, styling data) plus a generic field bag that
  holds every game-specific card field as text.
- KeywordRecord: One ``keyword`` block with its closed field set.
- MSESet: The root aggregate built by ``assemble_set()`` from the decoded
  ``set`` entry and the container's image / symbol entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from mse_ingest.exceptions import DecodeError
from mse_ingest.store import KeyValueStore


@dataclass
class CardRecord:
    """A decoded ``card`` record.

    Attributes:
        notes: The ``notes`` field, verbatim.
        date_created: Parsed ``time created``.
        date_modified: Parsed ``time modified``.
        styling_data: Nested ``styling data`` block.
        fields: Every other title, in source order, as String values.
    """
    notes: str | None = None
    date_created: datetime | None = None
    date_modified: datetime | None = None
    styling_data: KeyValueStore | None = None
    fields: KeyValueStore = field(default_factory=KeyValueStore)

    def get_field(self, name: str) -> str | None:
        """Text of the first generic field called *name*."""
        return self.fields.get_str(name)

    def to_plain(self) -> dict[str, Any]:
        return {
            "notes": self.notes,
            "time created": _iso(self.date_created),
            "time modified": _iso(self.date_modified),
            "styling data": (
                self.styling_data.to_plain() if self.styling_data is not None else None
            ),
            "fields": self.fields.to_plain(),
        }


@dataclass
class KeywordRecord:
    """A decoded ``keyword`` record; absent titles stay ``None``."""
    keyword: str | None = None
    match: str | None = None
    mode: str | None = None
    reminder: str | None = None

    def to_plain(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "match": self.match,
            "mode": self.mode,
            "reminder": self.reminder,
        }


@dataclass
class MSESet:
    """The assembled card set.

    Attributes:
        game: Name of the game package the set is made for.
        stylesheet: Default stylesheet name.
        mse_version: Format version that wrote the set.
        styling: Root ``styling`` block (empty store when absent).
        cards: Card records in source order.
        keywords: Keyword records in source order.
        images: Raw bytes of every ``image*`` entry, keyed by entry name.
        symbols: Decoded ``*.mse-symbol`` entries, keyed by entry name.
        extra: Passthrough root entries not consumed above.
        skipped: Card / keyword decode errors tolerated under
            ``record_errors="skip"``.
    """
    game: str | None = None
    stylesheet: str | None = None
    mse_version: str | None = None
    styling: KeyValueStore = field(default_factory=KeyValueStore)
    cards: list[CardRecord] = field(default_factory=list)
    keywords: list[KeywordRecord] = field(default_factory=list)
    images: dict[str, bytes] = field(default_factory=dict)
    symbols: dict[str, KeyValueStore] = field(default_factory=dict)
    extra: KeyValueStore = field(default_factory=KeyValueStore)
    skipped: list[DecodeError] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"MSESet(game={self.game!r}, stylesheet={self.stylesheet!r}, "
            f"cards={len(self.cards)}, keywords={len(self.keywords)}, "
            f"images={len(self.images)}, symbols={len(self.symbols)})"
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
