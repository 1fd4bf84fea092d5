"""
Set assembly: from a container to an MSESet.

``load_set()`` walks the container entries, decodes the ``set`` entry and
every symbol entry with a StructureBuilder, collects image bytes, and hands
the root store to ``assemble_set()``.

``assemble_set()`` is a two-phase extraction. It copies the root store,
consumes the well-known keys from the copy (``game``, ``stylesheet``,
``mse version``, ``styling``, every ``card`` and every ``keyword``) and
keeps whatever is left as the set's passthrough ``extra`` store. The root
store passed in is never modified.
"""

from __future__ import annotations

import logging
from datetime import datetime

from mse_ingest.config import ParserConfig
from mse_ingest.containers import (
    SET_ENTRY,
    BaseContainer,
    is_image_entry,
    is_symbol_entry,
)
from mse_ingest.exceptions import ContainerError, DecodeError, StructuralError
from mse_ingest.models import CardRecord, KeywordRecord, MSESet
from mse_ingest.parsers.builder import StructureBuilder
from mse_ingest.store import KeyValueStore
from mse_ingest.values import Color, TypedValue

logger = logging.getLogger(__name__)

WELL_KNOWN_KEYS = ("game", "stylesheet", "mse version", "styling", "card", "keyword")


def assemble_set(
    root: KeyValueStore,
    images: dict[str, bytes] | None = None,
    symbols: dict[str, KeyValueStore] | None = None,
    skipped: list[DecodeError] | None = None,
) -> MSESet:
    """Build an MSESet from the decoded root store of a ``set`` entry.

    Args:
        root: Root store of the ``set`` entry (left untouched).
        images: Image entry name -> raw bytes.
        symbols: Symbol entry name -> decoded store.
        skipped: Record errors tolerated while decoding.

    Returns:
        The assembled MSESet.
    """
    remaining = root.copy()

    mse_set = MSESet(
        game=_take_text(remaining, "game"),
        stylesheet=_take_text(remaining, "stylesheet"),
        mse_version=_take_text(remaining, "mse version"),
        images=dict(images or {}),
        symbols=dict(symbols or {}),
        skipped=list(skipped or []),
    )

    styling = remaining.remove_first("styling")
    if isinstance(styling, KeyValueStore):
        mse_set.styling = styling
    elif styling not in (None, ""):
        logger.warning("Ignoring flat 'styling' value %r", styling)

    for value in remaining.remove_all("card"):
        if isinstance(value, CardRecord):
            mse_set.cards.append(value)
        else:
            logger.warning("Ignoring 'card' entry that is not a card block: %r", value)

    for value in remaining.remove_all("keyword"):
        if isinstance(value, KeywordRecord):
            mse_set.keywords.append(value)
        else:
            logger.warning("Ignoring 'keyword' entry that is not a keyword block: %r", value)

    mse_set.extra = remaining
    logger.info(
        "Assembled set: game=%s, %d cards, %d keywords, %d passthrough entries",
        mse_set.game,
        len(mse_set.cards),
        len(mse_set.keywords),
        len(mse_set.extra),
    )
    return mse_set


def load_set(container: BaseContainer, config: ParserConfig | None = None) -> MSESet:
    """Decode every relevant entry of *container* into an MSESet.

    Raises:
        ContainerError: If the container has no ``set`` entry or an entry
            cannot be read.
        DecodeError: If the ``set`` entry (or a symbol entry) fails to decode
            outside a scoped card / keyword record.
    """
    config = config or ParserConfig()
    names = container.entry_names()
    if SET_ENTRY not in names:
        raise ContainerError(f"No '{SET_ENTRY}' entry in {container!r}")

    builder = StructureBuilder(config)
    root = builder.parse(container.read_text(SET_ENTRY))

    images: dict[str, bytes] = {}
    symbols: dict[str, KeyValueStore] = {}
    for name in names:
        if name == SET_ENTRY:
            continue
        if is_symbol_entry(name):
            symbols[name] = builder.parse(container.read_text(name))
        elif is_image_entry(name):
            images[name] = container.read_bytes(name)

    logger.info(
        "Read %s: %d entries, %d images, %d symbols",
        container, len(names), len(images), len(symbols),
    )
    return assemble_set(root, images=images, symbols=symbols, skipped=builder.skipped)


# -- Private helpers ---------------------------------------------------------

def _take_text(store: KeyValueStore, key: str) -> str | None:
    """Consume *key* and return it as text, or ``None`` when missing."""
    value = store.remove_first(key)
    if value is None:
        logger.warning("Set has no '%s' entry", key)
        return None
    return _as_text(value, key)


def _as_text(value: TypedValue, key: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Color):
        return str(value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    raise StructuralError(
        f"Expected a text value, got a {type(value).__name__}", title=key
    )
