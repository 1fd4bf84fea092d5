"""
Parsers sub-package for mse-ingest.

Turns the decoded text of one container entry into a KeyValueStore.

Layers, leaves first:
- lines.py: newline normalization and per-line classification (tab depth,
  record opener or not).
- splitter.py: partitions a text block into top-level raw records.
- scalars.py: classifies flat values as color, timestamp or string.
- builder.py: the recursive structure builder; dispatches ``card`` and
  ``keyword`` blocks to their decoders and recurses into everything else.
- card.py / keyword.py: single-level decoders for the two record shapes
  that repeat inside a set.
"""

from mse_ingest.parsers.builder import StructureBuilder, parse_text

__all__ = ["StructureBuilder", "parse_text"]
