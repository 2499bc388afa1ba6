"""Route -> normalize -> aggregate, in one synchronous pass.

Every call builds fresh lists; nothing is kept between invocations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from trade_digest.analyzers.position_summary import SymbolSummary, summarize_positions
from trade_digest.errors import EmptyResultError
from trade_digest.parsers.format_router import route_records
from trade_digest.parsers.trade_normalizer import CanonicalTrade, normalize_records

logger = logging.getLogger(__name__)


@dataclass
class ProcessedBundle:
    """Everything handed to the export and presentation layers."""

    source_name: str
    trades: list[CanonicalTrade]
    summary: list[SymbolSummary]
    processed_at: str
    records_seen: int = 0
    records_rejected: int = 0
    format_hint: str = "auto"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def process_text(
    text: str,
    format_hint: str = "auto",
    source_name: str = "",
) -> ProcessedBundle:
    """Run the whole pipeline over ``text``.

    Raises:
        FormatError: the text is not readable as the requested format.
        EmptyResultError: no record produced a trade.
    """
    records = route_records(text, format_hint)
    trades = normalize_records(records)
    rejected = len(records) - len(trades)

    logger.info(
        "[Pipeline] %s: %d records, %d trades, %d rejected",
        source_name or "<text>", len(records), len(trades), rejected,
    )
    if not trades:
        raise EmptyResultError("no valid trades found")

    return ProcessedBundle(
        source_name=source_name,
        trades=trades,
        summary=summarize_positions(trades),
        processed_at=_utc_now_iso(),
        records_seen=len(records),
        records_rejected=rejected,
        format_hint=format_hint,
    )


def process_file(path: str | Path, format_hint: str = "auto") -> ProcessedBundle:
    """Read ``path`` as UTF-8 (BOM tolerated) and process it."""
    path = Path(path)
    text = path.read_text(encoding="utf-8-sig")
    return process_text(text, format_hint=format_hint, source_name=path.name)
