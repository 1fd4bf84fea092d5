"""
Tabular exporter for mse-ingest.

Flattens an assembled MSESet into DataFrames and writes them to the output
directory in the configured format (CSV or Parquet).

Output file naming convention:
  ``cards.{format}``     -- one row per card, generic fields as columns.
  ``keywords.{format}``  -- one row per keyword record.
  ``_meta.{format}``     -- one row of set-level metadata.

CSV files are written with ``utf-8-sig`` encoding (BOM) so that non-ASCII
card text displays correctly when opened in Excel.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import pandas as pd

from mse_ingest.exceptions import ExportError
from mse_ingest.models import CardRecord, KeywordRecord, MSESet

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}

CARD_FIXED_COLUMNS = ["notes", "time_created", "time_modified"]
KEYWORD_COLUMNS = ["keyword", "match", "mode", "reminder"]


def cards_to_frame(cards: list[CardRecord]) -> pd.DataFrame:
    """One row per card.

    Columns are the fixed card fields followed by every generic field in
    order of first appearance across all cards. A field repeated within one
    card contributes its first value. ``styling data`` is not exported.
    """
    field_columns: dict[str, None] = {}
    rows: list[dict[str, object]] = []
    for card in cards:
        row: dict[str, object] = {
            "notes": card.notes,
            "time_created": card.date_created,
            "time_modified": card.date_modified,
        }
        for entry in card.fields:
            field_columns.setdefault(entry.key, None)
            row.setdefault(entry.key, entry.value)
        rows.append(row)

    columns = CARD_FIXED_COLUMNS + [c for c in field_columns if c not in CARD_FIXED_COLUMNS]
    df = pd.DataFrame(rows, columns=columns)
    df["time_created"] = pd.to_datetime(df["time_created"])
    df["time_modified"] = pd.to_datetime(df["time_modified"])
    return df


def keywords_to_frame(keywords: list[KeywordRecord]) -> pd.DataFrame:
    """One row per keyword record."""
    return pd.DataFrame(
        [[k.keyword, k.match, k.mode, k.reminder] for k in keywords],
        columns=KEYWORD_COLUMNS,
    )


def set_meta_frame(mse_set: MSESet) -> pd.DataFrame:
    """A single row describing the set and what was decoded from it."""
    return pd.DataFrame([{
        "game": mse_set.game,
        "stylesheet": mse_set.stylesheet,
        "mse_version": mse_set.mse_version,
        "cards": len(mse_set.cards),
        "keywords": len(mse_set.keywords),
        "images": len(mse_set.images),
        "symbols": len(mse_set.symbols),
        "skipped_records": len(mse_set.skipped),
        "passthrough_keys": ", ".join(mse_set.extra.keys()),
    }])


def _write_dataframe(df: pd.DataFrame, path: Path, output_format: str) -> None:
    """Write one set table (cards, keywords or _meta); writer errors become ExportError."""
    try:
        if output_format == "parquet":
            df.to_parquet(path, index=False, engine="pyarrow")
        else:
            df.to_csv(path, index=False, encoding="utf-8-sig")
    except Exception as exc:
        raise ExportError(f"Could not write table {path.name} ({output_format}): {exc}") from exc


def export_set(
    mse_set: MSESet,
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> list[str]:
    """Write the cards, keywords and ``_meta`` tables to disk.

    The output directory is created recursively if it does not exist.

    Returns:
        Written file paths as strings: cards, keywords, then ``_meta``.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    tables = {
        "cards": cards_to_frame(mse_set.cards),
        "keywords": keywords_to_frame(mse_set.keywords),
        "_meta": set_meta_frame(mse_set),
    }

    written: list[str] = []
    for table_name, df in tables.items():
        file_path = out / f"{table_name}.{output_format}"
        _write_dataframe(df, file_path, output_format)
        written.append(str(file_path))
        logger.info(
            "Exported table '%s' -> %s (%d rows, %d cols)",
            table_name,
            file_path.name,
            len(df),
            len(df.columns),
        )
    return written
