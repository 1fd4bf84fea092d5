"""
Custom exception hierarchy for mse-ingest.

- ``DecodeError`` and its two subclasses cover failures while turning the
  text of one container entry into a store. They carry the offending raw
  text, its line number and the title of the record being decoded.
- ``ContainerError`` covers the archive / directory collaborator.
- ``ConfigValidationError`` and ``ExportError`` cover the ambient layers.

A missing or mistyped field is never an exception: store lookups return
``None`` instead.
"""

from __future__ import annotations


class MseIngestError(Exception):
    """Base exception for all mse-ingest errors."""


class DecodeError(MseIngestError):
    """Raised when the text of a set, symbol or game entry cannot be decoded.

    Attributes:
        text: The raw text that failed to decode.
        line: 1-based line number within the decoded entry, if known.
        title: Title of the record being decoded, if known.
    """

    def __init__(
        self,
        message: str,
        text: str = "",
        line: int | None = None,
        title: str | None = None,
    ) -> None:
        self.message = message
        self.text = text
        self.line = line
        self.title = title
        super().__init__(message)

    def __str__(self) -> str:
        return self._format()

    def _format(self) -> str:
        where = []
        if self.line is not None:
            where.append(f"line {self.line}")
        if self.title is not None:
            where.append(f"record '{self.title}'")
        prefix = f"[{', '.join(where)}] " if where else ""
        snippet = self.text if len(self.text) <= 80 else self.text[:77] + "..."
        suffix = f": {snippet!r}" if self.text else ""
        return f"{prefix}{self.message}{suffix}"


class StructuralError(DecodeError):
    """Raised when the indentation structure itself is broken.

    For example a non-blank top-level line without a ``:`` separator
    (under the strict policy), or nesting deeper than ``max_depth``.
    """


class FormatError(DecodeError):
    """Raised when a value tagged as a fixed type fails its exact grammar.

    For example ``rgb(300,0,0)`` or a card ``time created`` that is not
    ``YYYY-MM-DD HH:MM:SS``.
    """


class ContainerError(MseIngestError):
    """Raised when a set container cannot be read.

    This can happen if:
    - The path does not exist or is not a zip archive / directory.
    - The ``set`` entry is missing.
    - A text entry is not valid UTF-8.
    """


class ConfigValidationError(MseIngestError):
    """Raised when an mse-ingest YAML config is empty or inconsistent."""


class ExportError(MseIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """
