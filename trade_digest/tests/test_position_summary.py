"""Tests for the per-symbol aggregation."""

import json
import math

import pytest

from trade_digest.analyzers.position_summary import (
    round_half_away,
    summarize_positions,
    symbol_sort_key,
)
from trade_digest.parsers.trade_normalizer import CanonicalTrade


def _t(symbol, side, qty, price, date=""):
    return CanonicalTrade(symbol=symbol, side=side, quantity=qty, price=price, date=date)


class TestSummarizePositions:
    def test_volume_weighted_averages_and_net(self):
        summary = summarize_positions([
            _t("AAPL", "buy", 10, 100),
            _t("AAPL", "buy", 10, 200),
            _t("AAPL", "sell", 5, 150),
        ])
        assert len(summary) == 1
        s = summary[0]
        assert s.symbol == "AAPL"
        assert s.total_bought_qty == 20
        assert s.avg_buy_price == 150
        assert s.total_bought_value == 3000
        assert s.total_sold_qty == 5
        assert s.avg_sell_price == 150
        assert s.total_sold_value == 750
        assert s.net_qty == 15
        assert s.net_value == 2250
        assert s.trades_count == 3

    def test_no_buys_has_no_average(self):
        s = summarize_positions([_t("TSLA", "sell", 2, 50)])[0]
        assert s.avg_buy_price is None
        assert s.total_bought_qty == 0
        assert s.net_qty == -2
        assert s.net_value == -100

    def test_zero_quantity_buys_have_no_average(self):
        s = summarize_positions([_t("X", "buy", 0, 10)])[0]
        assert s.avg_buy_price is None
        assert s.trades_count == 1

    def test_non_sell_sides_accumulate_as_buys(self):
        s = summarize_positions([_t("A", "short", 3, 2), _t("A", "SELL", 1, 2)])[0]
        assert s.total_bought_qty == 4
        assert s.total_sold_qty == 0

    def test_sorted_by_symbol_case_insensitively(self):
        trades = [_t(sym, "buy", 1, 1) for sym in ("msft", "Zm", "AAPL", "bby", "msft")]
        summary = summarize_positions(trades)
        assert [s.symbol for s in summary] == ["AAPL", "bby", "msft", "Zm"]
        assert summary[2].trades_count == 2

    def test_rounding_places(self):
        s = summarize_positions([
            _t("R", "buy", 0.1, 1), _t("R", "buy", 0.2, 1), _t("R", "buy", 2.7, 3.3333333),
        ])[0]
        assert s.total_bought_qty == 3.0
        # (0.1 + 0.2 + 8.99999991) / 3.0
        assert s.avg_buy_price == 3.1
        assert s.total_bought_value == 9.3

    def test_average_keeps_four_decimals(self):
        s = summarize_positions([_t("Q", "buy", 3, 1), _t("Q", "buy", 0, 5), _t("Q", "buy", 3, 2)])[0]
        assert s.avg_buy_price == 1.5
        s = summarize_positions([_t("Q", "buy", 3, 10 / 3 + 1)])[0]
        assert s.avg_buy_price == 4.3333

    def test_net_fields_match_rounded_totals(self):
        summary = summarize_positions([
            _t("N", "buy", 1.005, 3.14159), _t("N", "sell", 0.333, 2.71828),
            _t("M", "buy", 7.777, 0.1), _t("M", "sell", 7.776, 0.2),
        ])
        for s in summary:
            assert s.net_qty == round_half_away(s.total_bought_qty - s.total_sold_qty, 2)
            assert s.net_value == round_half_away(s.total_bought_value - s.total_sold_value, 2)

    def test_deterministic(self):
        trades = [_t("B", "buy", 1.1, 2.2), _t("A", "sell", 3.3, 4.4), _t("B", "sell", 0.5, 9.99)]
        assert summarize_positions(trades) == summarize_positions(list(trades))

    def test_empty(self):
        assert summarize_positions([]) == []

    def test_to_dict_field_names(self):
        d = summarize_positions([_t("A", "sell", 1, 1)])[0].to_dict()
        assert list(d) == [
            "symbol", "totalBoughtQty", "avgBuyPrice", "totalBoughtValue",
            "totalSoldQty", "avgSellPrice", "totalSoldValue", "netQty",
            "netValue", "tradesCount",
        ]
        assert d["avgBuyPrice"] is None


class TestRounding:
    @pytest.mark.parametrize("value,places,expected", [
        (2.675, 2, 2.68),
        (1.005, 2, 1.01),
        (-1.005, 2, -1.01),
        (0.125, 2, 0.13),
        (-0.125, 2, -0.13),
        (3.33335, 4, 3.3334),
        (10.0, 2, 10.0),
    ])
    def test_half_away_from_zero(self, value, places, expected):
        assert round_half_away(value, places) == expected

    def test_non_finite_passthrough(self):
        assert round_half_away(float("inf"), 2) == float("inf")

    def test_sort_key_ignores_accents(self):
        assert sorted(["ÉTF", "EUR", "ABC"], key=symbol_sort_key) == ["ABC", "ÉTF", "EUR"]


class TestLargeNumbers:
    def test_rounding_beyond_default_precision(self):
        assert round_half_away(1e27, 2) == 1e27
        assert round_half_away(1e30, 4) == 1e30
        assert round_half_away(-1.2345e40, 2) == -1.2345e40

    def test_huge_finite_quantity(self):
        s = summarize_positions([_t("BIG", "buy", 1e27, 1)])[0]
        assert s.total_bought_qty == 1e27
        assert s.total_bought_value == 1e27
        assert s.avg_buy_price == 1.0

    def test_overflowing_notional_is_not_accumulated(self):
        s = summarize_positions([_t("HUGE", "buy", 1e200, 1e200), _t("HUGE", "buy", 2, 3)])[0]
        assert s.trades_count == 2
        assert s.total_bought_qty == 2
        assert s.total_bought_value == 6
        assert s.avg_buy_price == 3.0
        # stays serializable as strict JSON
        json.dumps(s.to_dict(), allow_nan=False)

    def test_overflowing_quantity_total(self):
        s = summarize_positions([_t("Q", "sell", 1e308, 0), _t("Q", "sell", 1e308, 0)])[0]
        assert s.total_sold_qty == 1e308
        assert s.net_qty == -1e308
        assert all(
            v is None or math.isfinite(v)
            for v in (s.avg_sell_price, s.total_sold_value, s.net_value)
        )


class TestSymbolOrdering:
    def test_punctuation_digits_then_letters_lowercase_first(self):
        symbols = ["AAPL", "aapl", "Aapl", "_X", "~X", "1A", "éa", "Ea", "eb"]
        assert sorted(symbols, key=symbol_sort_key) == [
            "_X", "~X", "1A", "aapl", "Aapl", "AAPL", "Ea", "éa", "eb",
        ]

    def test_mixed_case_duplicates_stay_separate(self):
        summary = summarize_positions([
            _t("EURUSD", "buy", 1, 1), _t("eurusd", "sell", 1, 1), _t("EurUsd", "buy", 1, 1),
        ])
        assert [s.symbol for s in summary] == ["eurusd", "EurUsd", "EURUSD"]
