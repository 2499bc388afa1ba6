"""Trade file ingestion and per-symbol position summaries."""

__version__ = "1.0.0"
