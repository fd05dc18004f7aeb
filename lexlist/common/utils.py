"""Common utility functions shared across the library."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Set


_DEF_ENV_LOADED = False


def _load_env_file() -> None:
    """Load environment variables from .env file if present."""
    global _DEF_ENV_LOADED
    if _DEF_ENV_LOADED:
        return
    _DEF_ENV_LOADED = True
    try:
        here = Path(__file__).parent
        candidates = [
            Path.cwd() / ".env",
            here.parent.parent / ".env",  # project root
        ]
        for p in candidates:
            if not p.exists():
                continue
            for raw in p.read_text(encoding="utf-8", errors="ignore").splitlines():
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):].strip()
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                key = k.strip()
                val = v.strip().strip('"').strip("'")
                if key and os.environ.get(key) is None:
                    os.environ[key] = val
    except OSError:
        pass


def is_cjk_char(ch: str) -> bool:
    """Check if a character is a CJK (Chinese/Japanese/Korean) character."""
    if ch == "〇":
        return True
    code = ord(ch)
    if 0x3400 <= code <= 0x9FFF:
        return True
    if 0xF900 <= code <= 0xFAFF:
        return True
    if 0x2E80 <= code <= 0x2EFF:
        return True
    if 0x2F00 <= code <= 0x2FDF:
        return True
    if 0x20000 <= code <= 0x2EBEF:
        return True
    if 0x30000 <= code <= 0x3134F:
        return True
    return False


def first_cjk_char(text: str) -> str:
    """Return the first CJK character in text, or empty string."""
    return next((ch for ch in text if is_cjk_char(ch)), "")


def unique_preserve_order(items: Iterable[str]) -> List[str]:
    """Return unique items while preserving order."""
    seen: Set[str] = set()
    ordered: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def _clean_value(text: str) -> str:
    """Strip control characters and non-breaking spaces from cell text."""
    if not isinstance(text, str):
        return text
    text = text.replace("\xa0", " ")
    return "".join(ch for ch in text if (ch == "\n" or ch == "\t" or ord(ch) >= 32)).strip()


def ensure_dir(path: Path) -> None:
    """Create directory if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)


def dump_json(data: Any) -> str:
    """Serialize data the way every output file is written."""
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def write_text_atomic(path: Path, content: str) -> None:
    """Write a whole file through a temp file in the same directory.

    Readers never observe a partially written file; an existing file is only
    replaced once the new content is fully on disk.
    """
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
