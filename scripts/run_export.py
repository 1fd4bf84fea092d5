"""
Demo script: decode set packages and export their cards via the public API.

Usage:
    uv run python scripts/run_export.py inputs/my-set.mse-set [more sets...]
    uv run python scripts/run_export.py --config mse.yaml inputs/my-set.mse-set

Each set gets its own output subdirectory under the configured output_dir
(default ``outputs/``), holding cards, keywords and _meta tables.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_export")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str]) -> int:
    import mse_ingest
    from mse_ingest.config import MseConfig, load_config

    config = MseConfig()
    if len(argv) >= 2 and argv[0] == "--config":
        config = load_config(argv[1])
        argv = argv[2:]

    if not argv:
        log.error("Usage: run_export.py [--config CONFIG] SET [SET ...]")
        return 2

    failures = 0
    for set_path in argv:
        log.info("=" * 70)
        log.info("Processing: %s", set_path)
        try:
            mse_set = mse_ingest.open(set_path, config)
        except mse_ingest.MseIngestError as exc:
            log.error("FAILED  %s: %s", set_path, exc)
            failures += 1
            continue

        for error in mse_set.skipped:
            log.warning("  skipped record: %s", error)

        output_dir = Path(config.output.output_dir) / Path(set_path).stem
        written = mse_ingest.export_set(
            mse_set, output_dir, config.output.output_format
        )
        log.info("  %r", mse_set)
        for path in written:
            log.info("  wrote %s", path)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
