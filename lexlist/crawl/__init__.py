"""Sequential crawl of character pages into per-character records."""

from lexlist.crawl.processing import (
    CrawlSummary,
    WordListError,
    WordListItem,
    crawl,
    crawl_character,
    load_word_list,
    select_items,
)

__all__ = [
    "CrawlSummary",
    "WordListError",
    "WordListItem",
    "crawl",
    "crawl_character",
    "load_word_list",
    "select_items",
]
