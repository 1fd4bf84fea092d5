"""
Typed values stored in a KeyValueStore.

The set of value kinds is closed::

    str            -> ValueKind.STRING
    Color          -> ValueKind.COLOR
    datetime       -> ValueKind.TIMESTAMP
    KeyValueStore  -> ValueKind.NESTED_MAP
    CardRecord     -> ValueKind.CARD
    KeywordRecord  -> ValueKind.KEYWORD

Values are stored as their natural Python objects; ``kind_of()`` gives the
tag for exhaustive dispatch and rejects anything outside the set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from mse_ingest.models import CardRecord, KeywordRecord
    from mse_ingest.store import KeyValueStore

TypedValue = Union[str, "Color", datetime, "KeyValueStore", "CardRecord", "KeywordRecord"]


class ValueKind(Enum):
    STRING = "string"
    COLOR = "color"
    TIMESTAMP = "timestamp"
    NESTED_MAP = "nested_map"
    CARD = "card"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class Color:
    """An ``rgb(R,G,B)`` literal, each channel in 0-255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            channel = getattr(self, name)
            if isinstance(channel, bool) or not isinstance(channel, int):
                raise TypeError(f"Color channel '{name}' must be an int, got {channel!r}")
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel '{name}' out of range 0-255: {channel}")

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __str__(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


# Maps concrete Python type -> ValueKind
_KIND_MAP: dict[type, ValueKind] = {}


def _get_kind_map() -> dict[type, ValueKind]:
    """Lazily build the kind map to avoid circular imports."""
    if not _KIND_MAP:
        from mse_ingest.models import CardRecord, KeywordRecord
        from mse_ingest.store import KeyValueStore

        _KIND_MAP[str] = ValueKind.STRING
        _KIND_MAP[Color] = ValueKind.COLOR
        _KIND_MAP[datetime] = ValueKind.TIMESTAMP
        _KIND_MAP[KeyValueStore] = ValueKind.NESTED_MAP
        _KIND_MAP[CardRecord] = ValueKind.CARD
        _KIND_MAP[KeywordRecord] = ValueKind.KEYWORD
    return _KIND_MAP


def kind_of(value: Any) -> ValueKind:
    """Return the ValueKind tag of *value*.

    Raises:
        TypeError: If *value* is not one of the six supported kinds.
    """
    kind = _get_kind_map().get(type(value))
    if kind is None:
        raise TypeError(
            f"Unsupported value type {type(value).__name__!r}; expected one of "
            "str, Color, datetime, KeyValueStore, CardRecord, KeywordRecord"
        )
    return kind


@dataclass(frozen=True)
class Entry:
    """One (key, value) pair of a KeyValueStore."""

    key: str
    value: TypedValue

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value)
