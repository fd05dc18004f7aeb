"""Sequential crawl loop: fetch, extract and store one character at a time."""

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from lexlist.common.config import CrawlConfig
from lexlist.common.fetch import (
    FetchPolicy,
    RetriesExhausted,
    Transport,
    default_transports,
    fetch_with_policy,
)
from lexlist.common.logging import clear_log_context, log_debug, log_error, set_log_context
from lexlist.common.manifest import is_complete, mark_status
from lexlist.common.store import iter_raw_records, record_path, write_record
from lexlist.extract.assembler import extract_record
from lexlist.schema.record import CharacterRecord


class WordListError(Exception):
    """Raised when the input listing cannot be read."""


@dataclass(frozen=True)
class WordListItem:
    id: str
    character: str


@dataclass
class CrawlSummary:
    attempted: int = 0
    written: int = 0
    failed: int = 0
    skipped: int = 0


#########################################
# Input listing
#########################################

def _item_from_dict(entry: Any, source: str) -> WordListItem:
    if not isinstance(entry, dict):
        raise WordListError(f"{source}: expected an object per word, got {type(entry).__name__}")
    character_id = entry.get("id")
    character = entry.get("word") or entry.get("character")
    if not isinstance(character_id, str) or not character_id:
        raise WordListError(f"{source}: word entry without an id: {entry!r}")
    if not isinstance(character, str) or not character:
        raise WordListError(f"{source}: word entry {character_id} has no character")
    return WordListItem(id=character_id, character=character)


def _load_word_list_file(path: Path) -> List[WordListItem]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise WordListError(f"Cannot read word list {path}: {e}") from e
    if isinstance(data, dict):
        data = data.get("words")
    if not isinstance(data, list):
        raise WordListError(f"Word list {path} must be a list or an object with a 'words' list")
    return [_item_from_dict(entry, str(path)) for entry in data]


def _load_from_records(records_dir: Path) -> List[WordListItem]:
    if not records_dir.is_dir():
        raise WordListError(f"No word list given and records directory {records_dir} does not exist")
    items: List[WordListItem] = []
    for path, data in iter_raw_records(records_dir):
        if not isinstance(data, dict):
            continue
        character = data.get("character") or data.get("word")
        if isinstance(character, str) and character:
            items.append(WordListItem(id=str(data.get("id") or path.stem), character=character))
    return items


def load_word_list(config: CrawlConfig) -> List[WordListItem]:
    """Identifiers to crawl, from the configured word list or the stored records."""
    if config.word_list:
        return _load_word_list_file(Path(config.word_list))
    return _load_from_records(Path(config.records_dir))


def select_items(items: Sequence[WordListItem], start: int = 0, limit: Optional[int] = None) -> List[WordListItem]:
    """Apply the --start offset and --limit count."""
    selected = list(items[max(start, 0):])
    if limit is not None:
        selected = selected[:max(limit, 0)]
    return selected


#########################################
# One character
#########################################

def page_policy(config: CrawlConfig) -> FetchPolicy:
    return FetchPolicy(
        timeout=config.page_timeout,
        max_attempts=config.max_attempts,
        backoff=config.backoff,
        min_length=config.min_page_length,
    )


def script_policy(config: CrawlConfig) -> FetchPolicy:
    """Animation scripts get one short attempt; a missing script only costs the stroke vectors."""
    return FetchPolicy(timeout=config.script_timeout, max_attempts=1, backoff=0)


def crawl_character(
    item: WordListItem,
    config: CrawlConfig,
    transports: Sequence[Transport],
    sleep: Callable[[float], None] = time.sleep,
    verbose: bool = False,
    debug: bool = False,
) -> CharacterRecord:
    """Fetch and extract one character. Raises RetriesExhausted when the page cannot be fetched."""
    url = config.page_url(item.id)
    if verbose:
        print(f"[crawl] [fetch] {item.character} ({item.id}): {url}")
    html = fetch_with_policy(url, page_policy(config), transports, sleep=sleep, verbose=verbose)
    log_debug(debug, f"page {item.id}: {len(html)} chars")

    def load_script(script_url: str) -> str:
        return fetch_with_policy(script_url, script_policy(config), transports, sleep=sleep, verbose=verbose)

    return extract_record(
        character_id=item.id,
        character=item.character,
        html=html,
        source_url=url,
        resolve=config.absolute_url,
        load_script=load_script,
        verbose=verbose,
        debug=debug,
    )


#########################################
# Run
#########################################

def _mark_failed(records_dir: Path, character_id: str) -> None:
    try:
        mark_status(records_dir, character_id, False)
    except OSError as e:
        log_error(f"manifest update failed for {character_id}: {e}")


def crawl(
    config: CrawlConfig,
    items: Sequence[WordListItem],
    resume: bool = False,
    verbose: bool = False,
    debug: bool = False,
    transports: Optional[Sequence[Transport]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CrawlSummary:
    """Crawl items in order. A character that cannot be fetched, extracted or stored is logged and skipped."""
    records_dir = Path(config.records_dir)
    if transports is None:
        transports = default_transports()
    summary = CrawlSummary()

    for i, item in enumerate(items):
        set_log_context(item.id)
        try:
            if resume and is_complete(records_dir, item.id) and record_path(records_dir, item.id).exists():
                summary.skipped += 1
                if verbose:
                    print(f"[crawl] [skip] Already complete: {item.character}")
                continue

            summary.attempted += 1
            try:
                record = crawl_character(item, config, transports, sleep=sleep, verbose=verbose, debug=debug)
                write_record(records_dir, item.id, record.to_dict(), verbose=verbose)
                mark_status(records_dir, item.id, True)
            except RetriesExhausted as e:
                summary.failed += 1
                log_error(f"{item.id} {item.character}: {e.last_error} ({e.url})")
                _mark_failed(records_dir, item.id)
                continue
            except Exception as e:  # noqa: BLE001
                summary.failed += 1
                log_error(f"{item.id} {item.character}: {type(e).__name__}: {e} ({config.page_url(item.id)})")
                _mark_failed(records_dir, item.id)
                continue

            summary.written += 1
            if verbose:
                print(f"[crawl] [ok] {item.character}: {record.stroke_count} strokes, "
                      f"{len(record.stroke_vectors)} vectors, "
                      f"{len(record.vocabulary.stage1_words) + len(record.vocabulary.stage2_words)} staged words")

            if i < len(items) - 1 and config.delay > 0:
                sleep(config.delay)
        finally:
            clear_log_context()

    return summary
