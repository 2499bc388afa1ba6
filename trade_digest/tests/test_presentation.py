"""Tests for the pandas table views."""

from trade_digest.analyzers.position_summary import summarize_positions
from trade_digest.parsers.trade_normalizer import CanonicalTrade
from trade_digest.presentation import (
    SUMMARY_COLUMNS,
    render_summary,
    render_trades,
    summary_frame,
    trades_frame,
)

TRADES = [
    CanonicalTrade("AAPL", "buy", 10.0, 100.0, "d1"),
    CanonicalTrade("TSLA", "sell", 2.0, 50.0, "d2"),
]


def test_trades_frame():
    df = trades_frame(TRADES)
    assert list(df.columns) == ["symbol", "side", "quantity", "price", "date"]
    assert len(df) == 2
    assert df.loc[1, "side"] == "sell"


def test_summary_frame_placeholder():
    df = summary_frame(summarize_positions(TRADES))
    assert list(df.columns) == list(SUMMARY_COLUMNS)
    tsla = df[df["Symbol"] == "TSLA"].iloc[0]
    assert tsla["Avg Buy Price"] == "-"
    assert tsla["Avg Sell Price"] == 50.0
    assert tsla["Net Qty"] == -2.0


def test_render_summary():
    text = render_summary(summarize_positions(TRADES))
    assert "Avg Buy Price" in text
    assert "AAPL" in text and "TSLA" in text


def test_render_empty():
    assert render_summary([]) == "No summary to show."
    assert render_trades([]) == "No trades to show."
