"""
Configuration models and YAML I/O for mse-ingest.

Key models:
- MseConfig: Top-level config (parser + output).
- ParserConfig: Policies of the recursive decoder (depth cap, malformed
  line handling, per-record error scope, raw text titles).
- OutputConfig: Where and in which format tabular exports are written.

Key functions:
- load_config(path) -> MseConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

The open question of what to do with a top-level line that has no ``:``
is answered by ``ParserConfig.malformed_lines``: ``strict`` (the default)
raises ``StructuralError``, ``lenient`` keeps the line as a bare token.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from mse_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class ParserConfig(BaseModel):
    """Policies for the record splitter and the recursive builder."""

    max_depth: int = Field(
        32, ge=1, le=200, description="Maximum nesting level before StructuralError"
    )
    malformed_lines: Literal["strict", "lenient"] = Field(
        "strict",
        description=(
            "'strict' raises on a top-level line without ':'; "
            "'lenient' keeps it as a bare token with an empty value"
        ),
    )
    record_errors: Literal["raise", "skip"] = Field(
        "skip",
        description=(
            "'skip' drops a malformed card/keyword record and keeps its "
            "siblings; 'raise' aborts the whole parse"
        ),
    )
    raw_text_titles: list[str] = Field(
        default_factory=lambda: ["script", "init script"],
        description="Titles whose indented block is kept verbatim as text",
    )

    @field_validator("raw_text_titles")
    @classmethod
    def _strip_titles(cls, titles: list[str]) -> list[str]:
        cleaned = [t.strip() for t in titles]
        if any(not t for t in cleaned):
            raise ValueError("raw_text_titles must not contain blank titles")
        return cleaned


class OutputConfig(BaseModel):
    """Output settings for tabular export."""

    output_dir: str = Field("outputs/", description="Directory for output files")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Output format"
    )


class MseConfig(BaseModel):
    """Top-level configuration for mse-ingest."""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> MseConfig:
    """Load and validate a YAML config into an MseConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Config file must contain a mapping at the top level: {path}"
        )
    logger.info("Loaded config from %s", path)
    return MseConfig.model_validate(raw)


def save_config(config: MseConfig, path: str | Path) -> None:
    """Serialize an MseConfig to YAML with a short header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# mse-ingest configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
