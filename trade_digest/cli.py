"""
Command line entry point.

Usage:
  trade-digest trades.csv                       # summary + export artifact
  trade-digest trades.json --format json --show-trades
  trade-digest trades.csv --no-export
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from trade_digest.config import Settings, configure_logging
from trade_digest.errors import TradeDigestError
from trade_digest.export import write_bundle
from trade_digest.pipeline import process_file
from trade_digest.presentation import render_summary, render_trades


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trade-digest",
        description="Normalize a CSV or JSON trade file and summarize positions per symbol.",
    )
    parser.add_argument("path", help="Trade file to process")
    parser.add_argument(
        "--format", choices=["auto", "csv", "json"], default="auto",
        help="Input format (default: auto-detect)",
    )
    parser.add_argument(
        "--export-dir", type=str, default=None,
        help="Directory for the processed-trades JSON (default: TRADE_DIGEST_EXPORT_DIR or ./exports)",
    )
    parser.add_argument(
        "--no-export", action="store_true",
        help="Only print the summary, do not write the JSON artifact",
    )
    parser.add_argument(
        "--show-trades", action="store_true",
        help="Also print the normalized trades",
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Logging level (default: TRADE_DIGEST_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    try:
        bundle = process_file(args.path, format_hint=args.format)
    except FileNotFoundError:
        print(f"Error: file not found: {args.path}", file=sys.stderr)
        return 1
    except TradeDigestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{bundle.source_name}: {len(bundle.trades)} trades, "
          f"{bundle.records_rejected} rejected, {len(bundle.summary)} symbols")

    if args.show_trades:
        print()
        print(render_trades(bundle.trades))

    print()
    print(render_summary(bundle.summary))

    if not args.no_export:
        out_dir = args.export_dir or settings.export_dir
        path = write_bundle(bundle, out_dir)
        print(f"\nExported: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
