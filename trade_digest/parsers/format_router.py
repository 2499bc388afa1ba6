"""Route uploaded text to the delimited or JSON reader and return raw records.

A raw record maps field names (as supplied, case preserved) to string values.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from trade_digest.errors import EmptyInputError, FormatError
from trade_digest.parsers.csv_tokenizer import split_csv_line

logger = logging.getLogger(__name__)

FormatHint = Literal["csv", "json", "auto"]
RawRecord = dict[str, str]

SUPPORTED_HINTS: tuple[str, ...] = ("csv", "json", "auto")


def looks_like_json(text: str) -> bool:
    stripped = text.strip()
    return stripped.startswith("{") or stripped.startswith("[")


def route_records(text: str, format_hint: str = "auto") -> list[RawRecord]:
    """Read ``text`` as JSON or delimited data according to ``format_hint``.

    Raises:
        FormatError: unsupported hint, invalid JSON, no record array,
            or delimited input with no non-blank lines.
    """
    hint = (format_hint or "auto").strip().lower()
    if hint not in SUPPORTED_HINTS:
        raise FormatError(f"unsupported format hint: {format_hint}")

    if hint == "json" or (hint == "auto" and looks_like_json(text)):
        records = parse_json_records(text)
        logger.info("[FormatRouter] JSON input: %d records", len(records))
    else:
        records = parse_csv_records(text)
        logger.info("[FormatRouter] Delimited input: %d records", len(records))
    return records


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _find_record_array(parsed: Any) -> list[Any] | None:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        # dicts keep key-definition order from json.loads
        for key, value in parsed.items():
            if isinstance(value, list):
                logger.debug("[FormatRouter] Using array under key %r", key)
                return value
    return None


def _to_text(value: Any) -> str:
    """Render a JSON value the way it would appear in a text export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json_records(text: str) -> list[RawRecord]:
    try:
        # NaN and Infinity are not JSON
        parsed = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise FormatError("invalid syntax") from exc

    items = _find_record_array(parsed)
    if items is None:
        raise FormatError("no array of trades")

    records: list[RawRecord] = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        records.append({str(k): _to_text(v) for k, v in item.items()})

    if skipped:
        logger.debug("[FormatRouter] Skipped %d non-object array entries", skipped)
    return records


# ---------------------------------------------------------------------------
# Delimited text
# ---------------------------------------------------------------------------

def _column_name(header: list[str], index: int) -> str:
    if index < len(header) and header[index]:
        return header[index]
    return f"col{index}"


def parse_csv_records(text: str) -> list[RawRecord]:
    lines = [
        line for line in text.replace("\r\n", "\n").split("\n")
        if line.strip() != ""
    ]
    if not lines:
        raise EmptyInputError()

    header = [name.strip() for name in split_csv_line(lines[0])]

    records: list[RawRecord] = []
    blank_rows = 0
    for line in lines[1:]:
        fields = split_csv_line(line)
        if all(f.strip() == "" for f in fields):
            blank_rows += 1
            continue

        record: RawRecord = {}
        for j in range(max(len(header), len(fields))):
            record[_column_name(header, j)] = fields[j] if j < len(fields) else ""
        records.append(record)

    if blank_rows:
        logger.debug("[FormatRouter] Skipped %d rows with only empty fields", blank_rows)
    return records
