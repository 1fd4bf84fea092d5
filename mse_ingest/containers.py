"""
Container readers for set packages.

A set is distributed as a zip archive (``*.mse-set``) or, while being
edited, as an unpacked directory with the same entries. Both are exposed
through ``BaseContainer`` so the loader never cares which one it has.

Entry routing used by the loader:
- ``set``: the set text, decoded as UTF-8.
- ``*.mse-symbol``: symbol definitions, same text format.
- ``image*``: opaque image bytes.
Other entries are ignored.
"""

from __future__ import annotations

import logging
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from mse_ingest.exceptions import ContainerError

logger = logging.getLogger(__name__)

SET_ENTRY = "set"
SYMBOL_SUFFIX = ".mse-symbol"
IMAGE_PREFIX = "image"


def is_symbol_entry(name: str) -> bool:
    return name.endswith(SYMBOL_SUFFIX)


def is_image_entry(name: str) -> bool:
    return name.startswith(IMAGE_PREFIX)


class BaseContainer(ABC):
    """Read-only access to the named entries of a set package."""

    @abstractmethod
    def entry_names(self) -> list[str]:
        """Names of all file entries, in container order."""

    @abstractmethod
    def open_entry(self, name: str) -> BinaryIO:
        """Open an entry as a binary stream.

        Raises:
            ContainerError: If the entry does not exist.
        """

    def read_bytes(self, name: str) -> bytes:
        with self.open_entry(name) as stream:
            return stream.read()

    def read_text(self, name: str) -> str:
        """Read an entry as UTF-8 text (a leading BOM is dropped).

        Raises:
            ContainerError: If the entry is missing or not valid UTF-8.
        """
        data = self.read_bytes(name)
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ContainerError(f"Entry '{name}' is not valid UTF-8: {exc}") from exc

    def close(self) -> None:
        """Release any underlying resource."""

    def __enter__(self) -> BaseContainer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ZipContainer(BaseContainer):
    """A zipped ``*.mse-set`` package."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self.path, "r")
        except (OSError, zipfile.BadZipFile) as exc:
            raise ContainerError(f"Cannot open set archive {self.path}: {exc}") from exc

    def entry_names(self) -> list[str]:
        return [info.filename for info in self._zip.infolist() if not info.is_dir()]

    def open_entry(self, name: str) -> BinaryIO:
        try:
            return self._zip.open(name, "r")
        except KeyError as exc:
            raise ContainerError(f"Entry '{name}' not found in {self.path}") from exc

    def close(self) -> None:
        self._zip.close()

    def __repr__(self) -> str:
        return f"ZipContainer({str(self.path)!r})"


class DirectoryContainer(BaseContainer):
    """An unpacked set directory; entry names are POSIX relative paths."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.is_dir():
            raise ContainerError(f"Set directory not found: {self.path}")

    def entry_names(self) -> list[str]:
        return sorted(
            p.relative_to(self.path).as_posix()
            for p in self.path.rglob("*")
            if p.is_file()
        )

    def open_entry(self, name: str) -> BinaryIO:
        target = self.path / name
        if not target.is_file():
            raise ContainerError(f"Entry '{name}' not found in {self.path}")
        return open(target, "rb")

    def __repr__(self) -> str:
        return f"DirectoryContainer({str(self.path)!r})"


def open_container(path: str | Path) -> BaseContainer:
    """Open a set package as a zip archive or an unpacked directory.

    Raises:
        ContainerError: If *path* does not exist or is not a readable archive.
    """
    path = Path(path)
    if not path.exists():
        raise ContainerError(f"Set package not found: {path}")
    if path.is_dir():
        logger.debug("Opening %s as a directory container", path)
        return DirectoryContainer(path)
    logger.debug("Opening %s as a zip container", path)
    return ZipContainer(path)
