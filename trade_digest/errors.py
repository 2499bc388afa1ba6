"""Errors raised while turning uploaded trade files into summaries."""

from __future__ import annotations


class TradeDigestError(Exception):
    """Base class for every error the pipeline surfaces to a caller."""


class FormatError(TradeDigestError):
    """The input could not be read as delimited text or a JSON trade array."""


class EmptyResultError(TradeDigestError):
    """No trades survived normalization."""


class EmptyInputError(FormatError, EmptyResultError):
    """Delimited input had no non-blank lines at all."""

    def __init__(self, message: str = "empty input") -> None:
        super().__init__(message)
