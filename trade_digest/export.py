"""Serialize processed bundles into the downloadable JSON artifact."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from trade_digest.pipeline import ProcessedBundle

logger = logging.getLogger(__name__)


def bundle_to_dict(bundle: ProcessedBundle) -> dict[str, Any]:
    # "trades" must be the first array-valued key so the artifact reads back
    # as trade input.
    return {
        "sourceName": bundle.source_name,
        "trades": [t.to_dict() for t in bundle.trades],
        "summary": [s.to_dict() for s in bundle.summary],
        "processedAt": bundle.processed_at,
    }


def dump_bundle(bundle: ProcessedBundle) -> str:
    return json.dumps(bundle_to_dict(bundle), indent=2)


def export_filename(now_ms: int | None = None) -> str:
    """``processed-trades-<epoch millis>.json``"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"processed-trades-{now_ms}.json"


def write_bundle(bundle: ProcessedBundle, directory: str | Path) -> Path:
    """Write the artifact into ``directory`` (created if needed)."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename()
    path.write_text(dump_bundle(bundle) + "\n", encoding="utf-8")
    logger.info("[Export] Wrote %d trades, %d symbols to %s",
                len(bundle.trades), len(bundle.summary), path)
    return path
