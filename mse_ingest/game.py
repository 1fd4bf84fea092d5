"""
Game package loader.

A game package (``*.mse-game``) is a directory whose ``game`` entry uses the
same indentation-delimited format as a set, plus two preprocessing rules:

- ``include file: <name>`` splices the text of ``<name>`` (relative to the
  package directory) in place of the line, indented like the line it
  replaces. Includes nest; a cycle raises StructuralError.
- Lines whose first non-whitespace character is ``#`` are comments.

Only package metadata and keyword definitions are extracted here; card
field definitions stay in ``GameInfo.extra`` untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from mse_ingest.config import ParserConfig
from mse_ingest.exceptions import ContainerError, DecodeError, StructuralError
from mse_ingest.models import KeywordRecord
from mse_ingest.parsers.builder import StructureBuilder
from mse_ingest.parsers.lines import normalize_newlines
from mse_ingest.store import KeyValueStore

logger = logging.getLogger(__name__)

GAME_ENTRY = "game"

_INCLUDE_PATTERN = re.compile(r"^(\t*)include file:\s*(.+?)\s*$")
_COMMENT_PATTERN = re.compile(r"^\s*#")


@dataclass(frozen=True)
class GameVersion:
    """Package name and version number, e.g. ``magic`` / ``2009-01-20``."""
    name: str
    version: str

    def compatible_with(self, other: GameVersion) -> bool:
        """True if *other* is the same package at this version or newer."""
        if self.name.casefold() != other.name.casefold():
            return False
        return _version_key(self.version) <= _version_key(other.version)


@dataclass
class GameInfo:
    """Metadata of a decoded game package.

    Attributes:
        version: Package name (directory stem) and ``version``.
        installer_group: ``installer group`` entry.
        position_hint: ``position hint`` as an int, if numeric.
        icon: Bytes of the file named by ``icon``, if present.
        has_keywords: ``has keywords`` flag.
        keywords: Keyword records defined by the game.
        extra: Every other root entry.
        skipped: Keyword records dropped under ``record_errors="skip"``.
    """
    version: GameVersion
    installer_group: str | None = None
    position_hint: int | None = None
    icon: bytes | None = None
    has_keywords: bool = False
    keywords: list[KeywordRecord] = field(default_factory=list)
    extra: KeyValueStore = field(default_factory=KeyValueStore)
    skipped: list[DecodeError] = field(default_factory=list)


def read_game_text(path: str | Path) -> str:
    """Read the ``game`` entry of *path* with includes expanded and comments removed.

    Raises:
        ContainerError: If the package or an included file is missing, or an
            include points outside the package.
        StructuralError: If includes form a cycle.
    """
    root = Path(path)
    return _expand(root, GAME_ENTRY, stack=())


def load_game(path: str | Path, config: ParserConfig | None = None) -> GameInfo:
    """Decode an unpacked game package directory.

    Raises:
        ContainerError: If the directory or its ``game`` entry is missing.
        DecodeError: If the expanded text fails to decode.
    """
    root = Path(path)
    if not root.is_dir():
        raise ContainerError(f"Game package directory not found: {root}")

    builder = StructureBuilder(config)
    store = builder.parse(read_game_text(root))

    version = store.remove_first("version")
    info = GameInfo(
        version=GameVersion(name=root.stem, version=_text(version) or ""),
        installer_group=_text(store.remove_first("installer group")),
        position_hint=_int_or_none(store.remove_first("position hint")),
        has_keywords=(_text(store.remove_first("has keywords")) or "").lower() in ("true", "yes"),
        skipped=list(builder.skipped),
    )

    icon_name = _text(store.remove_first("icon"))
    if icon_name:
        icon_path = root / icon_name
        if icon_path.is_file():
            info.icon = icon_path.read_bytes()
        else:
            logger.warning("Game icon '%s' not found in %s", icon_name, root)

    for value in store.remove_all("keyword"):
        if isinstance(value, KeywordRecord):
            info.keywords.append(value)
    if info.keywords and not info.has_keywords:
        logger.warning("Game %s defines keywords but 'has keywords' is not set", root.name)

    info.extra = store
    logger.info(
        "Loaded game %s version %s: %d keywords, %d other entries",
        info.version.name, info.version.version, len(info.keywords), len(info.extra),
    )
    return info


# -- Private helpers ---------------------------------------------------------

def _expand(root: Path, name: str, stack: tuple[Path, ...]) -> str:
    target = (root / name).resolve()
    if not target.is_relative_to(root.resolve()):
        raise ContainerError(f"Included file '{name}' is outside {root}")
    if target in stack:
        chain = " -> ".join(p.name for p in stack + (target,))
        raise StructuralError(f"Include cycle: {chain}", title="include file")
    if not target.is_file():
        raise ContainerError(f"File '{name}' not found in {root}")
    text = normalize_newlines(target.read_text(encoding="utf-8-sig"))

    out: list[str] = []
    for line in text.split("\n"):
        if _COMMENT_PATTERN.match(line):
            continue
        match = _INCLUDE_PATTERN.match(line)
        if match is None:
            out.append(line)
            continue
        indent, included = match.groups()
        logger.debug("Including %s from %s", included, name)
        for included_line in _expand(root, included, stack + (target,)).split("\n"):
            out.append(indent + included_line if included_line else included_line)
    return "\n".join(out)


def _text(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _int_or_none(value: object) -> int | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        logger.warning("'position hint' is not an integer: %r", text)
        return None


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", version))
