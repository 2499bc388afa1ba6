"""Map raw records with arbitrary field names onto the canonical trade shape.

Field lookup goes through ``FIELD_SYNONYMS``: for each canonical attribute the
accepted names are tried in order, first with the record's own casing and
then against a lowercased view of the record.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)

FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "symbol": ("symbol", "ticker", "instrument"),
    "side": ("type", "side", "action"),
    "quantity": ("qty", "quantity", "shares", "amount"),
    "price": ("price", "tradeprice", "rate"),
    "date": ("date", "timestamp", "trade_date"),
}

_SIDE_SHORTHAND = {"b": "buy", "s": "sell"}


@dataclass(frozen=True)
class CanonicalTrade:
    """One normalized execution.

    ``side`` is usually ``"buy"`` or ``"sell"`` but unrecognized source values
    pass through unchanged. ``quantity`` is always unsigned.
    """

    symbol: str
    side: str
    quantity: float
    price: float
    date: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ASCII only: full-width or other Unicode digits are not numbers here.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
# Unsigned radix literals: 0x1A, 0o17, 0b101
_RADIX_RE = re.compile(r"0([xXoObB])([0-9a-fA-F]+)", re.ASCII)
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def parse_number_or_default(value: Any, default: float = 0.0) -> float:
    """Parse a trimmed numeric string; anything unparseable or non-finite
    becomes ``default``. Never raises.

    Accepts plain decimal/exponent text and unsigned ``0x``/``0o``/``0b``
    literals. Thousands separators, underscores, ``inf`` and ``nan`` are
    not numbers.
    """
    if value is None:
        return default
    text = str(value).strip()

    try:
        if _DECIMAL_RE.fullmatch(text):
            number = float(text)
        else:
            m = _RADIX_RE.fullmatch(text)
            if not m:
                return default
            number = float(int(m.group(2), _RADIX_BASES[m.group(1).lower()]))
    except (ValueError, OverflowError):
        return default

    if not math.isfinite(number):
        return default
    return number


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def resolve_field(
    record: Mapping[str, Any],
    lowered: Mapping[str, Any],
    names: tuple[str, ...],
) -> str:
    """Return the first value found under any of ``names``, or ``""``."""
    for name in names:
        if name in record:
            return _as_text(record[name])
        lower = name.lower()
        if lower in lowered:
            return _as_text(lowered[lower])
    return ""


def normalize_side(raw: str) -> str:
    side = raw.strip().lower()
    return _SIDE_SHORTHAND.get(side, side)


def normalize_trade(record: Mapping[str, Any]) -> CanonicalTrade | None:
    """Build a CanonicalTrade from ``record``, or None when it has no symbol.

    Bad numbers degrade to 0. A missing side is inferred from the sign of the
    quantity before the quantity is made absolute.
    """
    lowered = {str(k).lower(): v for k, v in record.items()}

    def get(attr: str) -> str:
        return resolve_field(record, lowered, FIELD_SYNONYMS[attr])

    symbol = get("symbol").strip()
    if not symbol:
        logger.debug("[Normalizer] Rejected record without symbol: %s", list(record.keys()))
        return None

    side = normalize_side(get("side"))
    signed_qty = parse_number_or_default(get("quantity"))
    price = abs(parse_number_or_default(get("price")))
    date = get("date").strip()

    if not side:
        side = "sell" if signed_qty < 0 else "buy"

    return CanonicalTrade(
        symbol=symbol,
        side=side,
        quantity=abs(signed_qty),
        price=price,
        date=date,
    )


def normalize_records(records: list[Mapping[str, Any]]) -> list[CanonicalTrade]:
    """Normalize every record, dropping the ones without a symbol."""
    trades: list[CanonicalTrade] = []
    for record in records:
        trade = normalize_trade(record)
        if trade is not None:
            trades.append(trade)
    return trades
