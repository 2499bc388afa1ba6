"""Tabular views of trades and summaries for terminals and reports."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from trade_digest.analyzers.position_summary import SymbolSummary
from trade_digest.parsers.trade_normalizer import CanonicalTrade

TRADE_COLUMNS = ["symbol", "side", "quantity", "price", "date"]

# Display header -> SymbolSummary attribute
SUMMARY_COLUMNS: dict[str, str] = {
    "Symbol": "symbol",
    "Bought Qty": "total_bought_qty",
    "Avg Buy Price": "avg_buy_price",
    "Bought Value": "total_bought_value",
    "Sold Qty": "total_sold_qty",
    "Avg Sell Price": "avg_sell_price",
    "Sold Value": "total_sold_value",
    "Net Qty": "net_qty",
    "Net Value": "net_value",
    "Trades": "trades_count",
}

MISSING_AVERAGE = "-"


def trades_frame(trades: Sequence[CanonicalTrade]) -> pd.DataFrame:
    return pd.DataFrame([t.to_dict() for t in trades], columns=TRADE_COLUMNS)


def summary_frame(summary: Sequence[SymbolSummary]) -> pd.DataFrame:
    """One row per symbol; undefined averages shown as ``-`` instead of 0."""
    rows = []
    for s in summary:
        row = {}
        for header, attr in SUMMARY_COLUMNS.items():
            value = getattr(s, attr)
            row[header] = MISSING_AVERAGE if value is None else value
        rows.append(row)
    return pd.DataFrame(rows, columns=list(SUMMARY_COLUMNS))


def render_summary(summary: Sequence[SymbolSummary]) -> str:
    if not summary:
        return "No summary to show."
    return summary_frame(summary).to_string(index=False)


def render_trades(trades: Sequence[CanonicalTrade]) -> str:
    if not trades:
        return "No trades to show."
    return trades_frame(trades).to_string(index=False)
