"""
Ordered multi-valued key/value store.

``KeyValueStore`` is the output of every decode: an insertion-ordered
sequence of ``Entry(key, value)`` pairs where keys may repeat (a set holds
many ``card`` and ``keyword`` entries side by side). Relative order of
entries with equal keys always matches their order in the source text,
including in the results of ``find_all()`` and ``remove_all()``.

Lookups go through a key -> positions index that is built on first use,
extended on append and dropped on removal. The primary structure stays a
plain list of entries.

Typed probes are lenient: ``get_first("x", Color)`` returns ``None`` both
when ``x`` is missing and when the first ``x`` holds something other than a
``Color``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Iterator, TypeVar, overload

from mse_ingest.values import Color, Entry, TypedValue, kind_of

T = TypeVar("T")


class KeyValueStore:
    """Insertion-ordered sequence of (key, typed value) pairs."""

    def __init__(self, entries: Iterable[tuple[str, TypedValue]] | None = None) -> None:
        self._entries: list[Entry] = []
        self._index: dict[str, list[int]] | None = None
        if entries is not None:
            for key, value in entries:
                self.append(key, value)

    # -- Construction -------------------------------------------------------

    def append(self, key: str, value: TypedValue) -> None:
        """Append an entry at the end, keeping duplicates.

        Raises:
            TypeError: If *value* is not one of the supported value kinds.
        """
        kind_of(value)
        if self._index is not None:
            self._index.setdefault(key, []).append(len(self._entries))
        self._entries.append(Entry(key, value))

    def copy(self) -> KeyValueStore:
        """Shallow copy: a new entry list sharing the stored values."""
        clone = KeyValueStore()
        clone._entries = list(self._entries)
        return clone

    # -- Queries ------------------------------------------------------------

    def get_entry(self, key: str) -> Entry | None:
        """First entry with *key*, or ``None``."""
        positions = self._positions(key)
        if not positions:
            return None
        return self._entries[positions[0]]

    @overload
    def get_first(self, key: str) -> TypedValue | None: ...

    @overload
    def get_first(self, key: str, expected: type[T]) -> T | None: ...

    def get_first(self, key: str, expected: type | None = None) -> Any:
        """Value of the first entry with *key*.

        When *expected* is given, returns ``None`` unless that first value
        is of exactly that kind (a later entry with the same key is not
        consulted).
        """
        entry = self.get_entry(key)
        if entry is None:
            return None
        if expected is not None and not _matches(entry.value, expected):
            return None
        return entry.value

    def get_str(self, key: str) -> str | None:
        return self.get_first(key, str)

    def get_color(self, key: str) -> Color | None:
        return self.get_first(key, Color)

    def get_timestamp(self, key: str) -> datetime | None:
        return self.get_first(key, datetime)

    def get_map(self, key: str) -> KeyValueStore | None:
        return self.get_first(key, KeyValueStore)

    def find_all(self, key: str) -> list[TypedValue]:
        """All values stored under *key*, in original order."""
        return [self._entries[i].value for i in self._positions(key)]

    def keys(self) -> list[str]:
        """Distinct keys in order of first appearance."""
        seen: dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.key, None)
        return list(seen)

    # -- Destructive extraction --------------------------------------------

    def remove_first(self, key: str) -> TypedValue | None:
        """Remove the first entry with *key* and return its value."""
        positions = self._positions(key)
        if not positions:
            return None
        entry = self._entries.pop(positions[0])
        self._index = None
        return entry.value

    def remove_all(self, key: str) -> list[TypedValue]:
        """Remove every entry with *key*; return their values in original order."""
        removed = [e.value for e in self._entries if e.key == key]
        if removed:
            self._entries = [e for e in self._entries if e.key != key]
            self._index = None
        return removed

    def without(self, *keys: str) -> KeyValueStore:
        """A fresh store holding every entry whose key is not in *keys*."""
        dropped = set(keys)
        rest = KeyValueStore()
        rest._entries = [e for e in self._entries if e.key not in dropped]
        return rest

    # -- Conversion ---------------------------------------------------------

    def to_plain(self) -> list[list[Any]]:
        """Plain ``[key, value]`` pairs, recursing into nested values.

        Colors become ``"rgb(r,g,b)"`` strings, timestamps ISO strings, and
        cards / keywords dicts. Duplicate keys are preserved.
        """
        return [[e.key, _plain_value(e.value)] for e in self._entries]

    # -- Dunder -------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self._positions(key))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyValueStore):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"KeyValueStore({[(e.key, e.value) for e in self._entries]!r})"

    # -- Private helpers ----------------------------------------------------

    def _positions(self, key: str) -> list[int]:
        if self._index is None:
            index: dict[str, list[int]] = {}
            for i, entry in enumerate(self._entries):
                index.setdefault(entry.key, []).append(i)
            self._index = index
        return self._index.get(key, [])


def _matches(value: TypedValue, expected: type) -> bool:
    return type(value) is expected


def _plain_value(value: TypedValue) -> Any:
    if isinstance(value, KeyValueStore):
        return value.to_plain()
    if isinstance(value, Color):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return value.to_plain()
