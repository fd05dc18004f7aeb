"""Corpus-wide index generation."""

from lexlist.index.radicals import RADICAL_STROKES, RADICAL_VARIANT_TO_PRIMARY, radical_stroke_count
from lexlist.index.builder import (
    CorpusCharacter,
    INDEX_FILES,
    build_indexes,
    load_corpus,
    rebuild_indexes,
    write_indexes,
)

__all__ = [
    # radicals
    "RADICAL_STROKES",
    "RADICAL_VARIANT_TO_PRIMARY",
    "radical_stroke_count",
    # builder
    "CorpusCharacter",
    "INDEX_FILES",
    "build_indexes",
    "load_corpus",
    "rebuild_indexes",
    "write_indexes",
]
