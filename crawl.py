#!/usr/bin/env python3
"""Crawl character pages into per-character JSON records.

For each identifier in the word list (or in the existing records when no list
is given), fetch the character page and its stroke animation script, extract
metadata, vocabulary and stroke vectors, and write {id}.json into the records
folder. A character that cannot be fetched is logged and skipped.

Usage:
    python crawl.py --words data/words.json --limit 20 --verbose
    python crawl.py --config data/-config.json --start 100 --resume
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from lexlist.common.config import CONFIG_FILENAME, ConfigError, load_config
from lexlist.common.logging import setup_prefixed_stdout
from lexlist.crawl import WordListError, crawl, load_word_list, select_items


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawl."""
    parser = argparse.ArgumentParser(
        description="Crawl character pages and write one JSON record per character"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of characters to crawl",
    )
    parser.add_argument(
        "--start",
        type=int,
        default=0,
        help="Offset into the word list (default: 0)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Folder for character records (overrides records_dir)",
    )
    parser.add_argument(
        "--words",
        type=str,
        default=None,
        help="JSON word list with id/word entries",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to a {CONFIG_FILENAME} file",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Delay between successful characters in seconds (default: 1)",
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Skip characters already complete in the crawl manifest",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(
            Path(args.config) if args.config else None,
            records_dir=args.output_dir,
            word_list=args.words,
            delay=args.delay,
        )
        items = select_items(load_word_list(config), start=args.start, limit=args.limit)
    except (ConfigError, WordListError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    setup_prefixed_stdout()
    if args.verbose:
        print(f"\n{'=' * 60}")
        print(f"🚀 Crawl: {len(items)} characters → {config.records_dir}")
        print(f"{'=' * 60}")

    summary = crawl(config, items, resume=args.resume, verbose=args.verbose, debug=args.debug)

    if args.verbose:
        print(f"\n{'=' * 60}")
        print("✅ Complete!")
        print(f"   Written: {summary.written}")
        print(f"   Failed: {summary.failed}")
        print(f"   Skipped: {summary.skipped}")
        print(f"{'=' * 60}\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
