#!/usr/bin/env python3
"""Rebuild the lookup indexes from every stored character record.

Writes all.json, lexical-lists-hk.json, strokes.json, radical.json,
stage.json and summary.json into the indexes folder, replacing them whole.

Usage:
    python build_indexes.py --records-dir data/characters --output-dir data/indexes --verbose
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from lexlist.common.config import CrawlConfig
from lexlist.common.logging import setup_prefixed_stdout
from lexlist.index import rebuild_indexes


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the index build."""
    defaults = CrawlConfig()
    parser = argparse.ArgumentParser(
        description="Build lookup indexes from the character records"
    )
    parser.add_argument(
        "--records-dir",
        type=str,
        default=defaults.records_dir,
        help=f"Folder of character records (default: {defaults.records_dir})",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=defaults.indexes_dir,
        help=f"Folder for index files (default: {defaults.indexes_dir})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    records_dir = Path(args.records_dir)
    if not records_dir.is_dir():
        print(f"[error] Records folder does not exist: {records_dir}", file=sys.stderr)
        return 1

    setup_prefixed_stdout()
    try:
        rebuild_indexes(records_dir, Path(args.output_dir), verbose=args.verbose)
    except OSError as e:
        print(f"[error] Index build failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
