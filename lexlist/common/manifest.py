"""Crawl manifest: which character records were written successfully.

Stored as -crawl.manifest.json next to the records:
{
  "file_status": {"0001": true, "0002": false, ...},
  "complete": 1,
  "remaining": 1
}
"""

import json
from pathlib import Path
from typing import Any, Dict

from lexlist.common.utils import dump_json, write_text_atomic


MANIFEST_FILENAME = "-crawl.manifest.json"


def manifest_path(records_dir: Path) -> Path:
    """Get the manifest path for a records directory."""
    return records_dir / MANIFEST_FILENAME


def _compute_stats(file_status: Dict[str, bool]) -> Dict[str, Any]:
    """Compute manifest statistics."""
    ordered = {k: bool(file_status[k]) for k in sorted(file_status)}
    return {
        "file_status": ordered,
        "complete": sum(1 for v in ordered.values() if v),
        "remaining": sum(1 for v in ordered.values() if not v),
    }


def load_manifest(records_dir: Path) -> Dict[str, Any]:
    """Load the manifest. Returns an empty structure if it doesn't exist or is unreadable."""
    path = manifest_path(records_dir)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = None
        if isinstance(data, dict) and isinstance(data.get("file_status"), dict):
            return _compute_stats(data["file_status"])
    return _compute_stats({})


def save_manifest(records_dir: Path, file_status: Dict[str, bool]) -> None:
    """Save the manifest, computing stats."""
    write_text_atomic(manifest_path(records_dir), dump_json(_compute_stats(file_status)))


def is_complete(records_dir: Path, character_id: str) -> bool:
    """Check if a character is marked as complete."""
    return bool(load_manifest(records_dir)["file_status"].get(character_id, False))


def mark_status(records_dir: Path, character_id: str, complete: bool) -> None:
    """Mark a character complete (record written) or incomplete (last crawl failed).

    A failure never downgrades an identifier whose record was written earlier,
    because that record is still on disk and still valid.
    """
    file_status = dict(load_manifest(records_dir)["file_status"])
    if complete or not file_status.get(character_id, False):
        file_status[character_id] = complete
    save_manifest(records_dir, file_status)
