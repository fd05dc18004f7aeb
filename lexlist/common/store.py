"""On-disk storage for character records (one JSON file per identifier)."""

import json
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from lexlist.common.utils import dump_json, write_text_atomic


def sanitize_filename(name: str) -> str:
    """Sanitize a string for use as a filename.

    Replaces invalid characters with underscores.
    """
    return re.sub(r'[/\\:*?"<>|]', '_', name)


def record_path(records_dir: Path, character_id: str) -> Path:
    """Get the record file path for a character identifier."""
    return records_dir / f"{sanitize_filename(character_id)}.json"


def read_record(records_dir: Path, character_id: str) -> Optional[Dict]:
    """Read a stored record. Returns None if missing or unreadable."""
    path = record_path(records_dir, character_id)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def write_record(records_dir: Path, character_id: str, data: Dict, verbose: bool = False) -> Path:
    """Write a complete record, replacing any previous file in one step."""
    path = record_path(records_dir, character_id)
    write_text_atomic(path, dump_json(data))
    if verbose:
        print(f"[store] [file] Saved: {path.name}")
    return path


def iter_record_files(records_dir: Path) -> List[Path]:
    """List record files in identifier order, ignoring manifests and temp files."""
    return sorted(
        p for p in records_dir.glob("*.json")
        if not p.name.startswith("-") and not p.name.startswith(".")
    )


def iter_raw_records(records_dir: Path) -> Iterator[Tuple[Path, object]]:
    """Yield (path, parsed JSON or the exception raised while reading it)."""
    for path in iter_record_files(records_dir):
        try:
            yield path, json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            yield path, e
