"""Quote-aware splitting of a single delimited line.

Lenient: a stray quote toggles quoting
wherever it appears, and a quote left open simply ends with the line.
Multi-line quoted fields are not supported.
"""

from __future__ import annotations

QUOTE = '"'
DEFAULT_DELIMITER = ","


def split_csv_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split one line into raw field strings.

    ``""`` inside a quoted region is a literal quote; a delimiter inside a
    quoted region belongs to the field. Fields are returned untrimmed.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields
