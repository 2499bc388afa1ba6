"""
Per-symbol position summary: fold canonical trades into bought/sold totals,
volume-weighted average prices and net position.

Rounding is half away from zero. Quantities and notional values keep 2
decimals, average prices keep 4. Net fields are derived from the rounded
totals so they always match them.
"""

from __future__ import annotations

import logging
import math
import unicodedata
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, Optional

from trade_digest.parsers.trade_normalizer import CanonicalTrade

logger = logging.getLogger(__name__)

QTY_PLACES = 2
VALUE_PLACES = 2
AVG_PRICE_PLACES = 4


def round_half_away(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals, ties away from zero.

    Works on the shortest decimal repr of the float so ``1.005`` rounds to
    ``1.01`` rather than to the binary neighbour's ``1.0``. Precision grows
    with the magnitude, so ``1e27`` rounds as well as ``1.5`` does.
    """
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(28, exact.adjusted() + places + 2)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def _char_class(ch: str) -> int:
    category = unicodedata.category(ch)
    if category.startswith("L"):
        return 2
    if category.startswith("N"):
        return 1
    return 0


def symbol_sort_key(symbol: str) -> tuple:
    """Collation key in the spirit of the root locale.

    Compared level by level: base letters (punctuation < digits < letters,
    case and accents ignored), then accents, then case with lowercase first.
    The exact text breaks any remaining tie.
    """
    primary: list[tuple[int, str]] = []
    accents: list[str] = []
    case: list[int] = []
    for ch in unicodedata.normalize("NFD", symbol):
        if unicodedata.combining(ch) and accents:
            accents[-1] += ch
            continue
        primary.append((_char_class(ch), ch.casefold()))
        accents.append("")
        case.append(1 if ch.isupper() else 0)
    return (tuple(primary), tuple(accents), tuple(case), symbol)


@dataclass(frozen=True)
class SymbolSummary:
    """Aggregated position for one instrument."""

    symbol: str
    total_bought_qty: float
    avg_buy_price: Optional[float]  # None when nothing was bought
    total_bought_value: float
    total_sold_qty: float
    avg_sell_price: Optional[float]  # None when nothing was sold
    total_sold_value: float
    net_qty: float
    net_value: float
    trades_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "totalBoughtQty": self.total_bought_qty,
            "avgBuyPrice": self.avg_buy_price,
            "totalBoughtValue": self.total_bought_value,
            "totalSoldQty": self.total_sold_qty,
            "avgSellPrice": self.avg_sell_price,
            "totalSoldValue": self.total_sold_value,
            "netQty": self.net_qty,
            "netValue": self.net_value,
            "tradesCount": self.trades_count,
        }


@dataclass
class _SymbolTotals:
    """Running totals while folding trades."""

    buy_qty: float = 0.0
    buy_value: float = 0.0
    sell_qty: float = 0.0
    sell_value: float = 0.0
    trades: int = 0

    def add(self, trade: CanonicalTrade) -> None:
        qty = trade.quantity
        value = qty * trade.price
        self.trades += 1
        # Only an exact "sell" reduces the position; every other side is a buy.
        if trade.side == "sell":
            totals = (self.sell_qty + qty, self.sell_value + value)
        else:
            totals = (self.buy_qty + qty, self.buy_value + value)

        # A trade that would overflow a total is counted but not accumulated,
        # so totals, averages and the exported JSON stay finite.
        if not all(math.isfinite(t) for t in totals):
            logger.warning(
                "[Summary] Skipped overflowing trade for %s (qty=%r, price=%r)",
                trade.symbol, trade.quantity, trade.price,
            )
            return

        if trade.side == "sell":
            self.sell_qty, self.sell_value = totals
        else:
            self.buy_qty, self.buy_value = totals

    def to_summary(self, symbol: str) -> SymbolSummary:
        bought_qty = round_half_away(self.buy_qty, QTY_PLACES)
        sold_qty = round_half_away(self.sell_qty, QTY_PLACES)
        bought_value = round_half_away(self.buy_value, VALUE_PLACES)
        sold_value = round_half_away(self.sell_value, VALUE_PLACES)

        return SymbolSummary(
            symbol=symbol,
            total_bought_qty=bought_qty,
            avg_buy_price=_average(self.buy_value, self.buy_qty),
            total_bought_value=bought_value,
            total_sold_qty=sold_qty,
            avg_sell_price=_average(self.sell_value, self.sell_qty),
            total_sold_value=sold_value,
            net_qty=round_half_away(bought_qty - sold_qty, QTY_PLACES),
            net_value=round_half_away(bought_value - sold_value, VALUE_PLACES),
            trades_count=self.trades,
        )


def _average(value: float, qty: float) -> Optional[float]:
    if qty <= 0:
        return None
    avg = value / qty
    if not math.isfinite(avg):
        return None
    return round_half_away(avg, AVG_PRICE_PLACES)


def summarize_positions(trades: Iterable[CanonicalTrade]) -> list[SymbolSummary]:
    """Fold ``trades`` into one summary per symbol, sorted by symbol."""
    totals: dict[str, _SymbolTotals] = {}
    for trade in trades:
        bucket = totals.get(trade.symbol)
        if bucket is None:
            bucket = totals[trade.symbol] = _SymbolTotals()
        bucket.add(trade)

    return [
        totals[symbol].to_summary(symbol)
        for symbol in sorted(totals, key=symbol_sort_key)
    ]
