"""
mse-ingest: Python library for reading Magic Set Editor set packages.

Public API surface:

- ``open(path, ...)`` -- **recommended entry point**. Accepts a zipped
  ``*.mse-set`` archive or an unpacked set directory and returns an
  ``MSESet``.

- ``load_set(container, ...)`` -- Same, for an already opened container.

- ``parse_text(text, ...)`` -- Decode the text of one entry (``set``,
  ``*.mse-symbol``, ``game``) into an ordered ``KeyValueStore``.

- ``load_game(path, ...)`` -- Decode an unpacked ``*.mse-game`` package.

- ``export_set(mse_set, ...)`` -- Write cards / keywords / metadata tables
  as CSV or Parquet.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mse_ingest.assemble import assemble_set, load_set
from mse_ingest.config import MseConfig, ParserConfig, load_config
from mse_ingest.containers import open_container
from mse_ingest.exceptions import (
    ContainerError,
    DecodeError,
    FormatError,
    MseIngestError,
    StructuralError,
)
from mse_ingest.export import export_set
from mse_ingest.game import GameInfo, load_game
from mse_ingest.models import CardRecord, KeywordRecord, MSESet
from mse_ingest.parsers.builder import parse_text
from mse_ingest.store import KeyValueStore
from mse_ingest.values import Color, ValueKind

__all__ = [
    "open",
    "load_set",
    "assemble_set",
    "parse_text",
    "load_game",
    "export_set",
    "MSESet",
    "CardRecord",
    "KeywordRecord",
    "GameInfo",
    "KeyValueStore",
    "Color",
    "ValueKind",
    "MseConfig",
    "ParserConfig",
    "MseIngestError",
    "DecodeError",
    "StructuralError",
    "FormatError",
    "ContainerError",
]

logger = logging.getLogger(__name__)


def open(
    path: str | Path,
    config: MseConfig | ParserConfig | str | Path | None = None,
) -> MSESet:
    """Open a set package and decode it into an ``MSESet``.

    Args:
        path: A zipped ``*.mse-set`` file or an unpacked set directory.
        config: Parser policies, given as an ``MseConfig``, a
            ``ParserConfig``, or a path to a YAML config file. Defaults to
            ``ParserConfig()``.

    Returns:
        The assembled set. Cards or keywords that failed to decode under
        ``record_errors="skip"`` are listed in ``MSESet.skipped``.

    Raises:
        ContainerError: If the package cannot be read or has no ``set`` entry.
        DecodeError: If the ``set`` entry fails to decode.

    Examples::

        s = mse_ingest.open("sets/my-set.mse-set")
        print(s.game, len(s.cards))
        names = [card.get_field("name") for card in s.cards]
    """
    parser_config = _resolve_parser_config(config)
    logger.info("open() -- path=%s", path)
    with open_container(path) as container:
        return load_set(container, parser_config)


def _resolve_parser_config(
    config: MseConfig | ParserConfig | str | Path | None,
) -> ParserConfig:
    if config is None:
        return ParserConfig()
    if isinstance(config, ParserConfig):
        return config
    if isinstance(config, MseConfig):
        return config.parser
    return load_config(config).parser
