"""Corpus-wide lookup indexes.

A pure, full rebuild over every stored record:
- all.json: every character
- lexical-lists-hk.json: characters in the primary-school list
- strokes.json: characters grouped by stroke count (1-32)
- radical.json: characters grouped by radical, radicals ordered by their own stroke count
- stage.json: staged words from every record, deduplicated across the corpus and
  sorted by codepoint (not by zh-Hant collation)
- summary.json: totals and histograms
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lexlist.common.store import iter_raw_records
from lexlist.common.utils import dump_json, write_text_atomic
from lexlist.index.radicals import radical_stroke_count
from lexlist.schema.record import WordEntry
from lexlist.schema.validation import normalize_record_dict, validate_record_dict


# strokes.json and the summary histogram only cover 1..MAX_STROKES; a character
# above it is still listed in all.json but counted in neither.
MAX_STROKES = 32
INDEX_FILES = (
    "all.json",
    "lexical-lists-hk.json",
    "strokes.json",
    "radical.json",
    "stage.json",
    "summary.json",
)


@dataclass(frozen=True)
class CorpusCharacter:
    """The slice of a stored record the indexes need."""
    id: str
    character: str
    radical: str = ""
    stroke_count: int = 0
    jyutping: str = ""
    in_lexical_lists_hk: bool = False
    stage1_words: Tuple[WordEntry, ...] = ()
    stage2_words: Tuple[WordEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CorpusCharacter":
        def words(key: str) -> Tuple[WordEntry, ...]:
            return tuple(
                WordEntry(word=w["word"], jyutping=w.get("jyutping"), pinyin=w.get("pinyin"), stage=w.get("stage"))
                for w in data.get(key) or []
            )
        return cls(
            id=data["id"],
            character=data["character"],
            radical=data.get("radical") or "",
            stroke_count=data.get("strokeCount") or 0,
            jyutping=data.get("jyutping") or "",
            in_lexical_lists_hk=data.get("inLexicalListsHK") is True,
            stage1_words=words("stage1Words"),
            stage2_words=words("stage2Words"),
        )


@dataclass(frozen=True)
class IndexEntry:
    key: str
    id: str
    character: str
    radical: str
    stroke_count: int
    jyutping: str
    in_lexical_lists_hk: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "id": self.id,
            "character": self.character,
            "radical": self.radical,
            "strokeCount": self.stroke_count,
            "jyutping": self.jyutping,
            "inLexicalListsHK": self.in_lexical_lists_hk,
        }


@dataclass(frozen=True)
class WordIndexEntry:
    word: str
    jyutping: str
    pinyin: str
    character_id: str
    character: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "word": self.word,
            "jyutping": self.jyutping,
            "pinyin": self.pinyin,
            "characterId": self.character_id,
            "character": self.character,
        }


@dataclass(frozen=True)
class IndexGroup:
    key: Any
    entries: Tuple[Any, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "entries": [e.to_dict() for e in self.entries]}


#########################################
# Loading
#########################################

def load_corpus(records_dir: Path, verbose: bool = False) -> List[CorpusCharacter]:
    """Read every record file; unreadable or badly shaped files are skipped."""
    corpus: List[CorpusCharacter] = []
    for path, data in iter_raw_records(records_dir):
        if isinstance(data, Exception):
            print(f"[index] [skip] {path.name}: {data}")
            continue
        if isinstance(data, dict):
            data = normalize_record_dict(data)
        errors = validate_record_dict(data)
        if errors:
            print(f"[index] [skip] {path.name}: {'; '.join(errors)}")
            continue
        corpus.append(CorpusCharacter.from_dict(data))
    if verbose:
        print(f"[index] Loaded {len(corpus)} characters from {records_dir}")
    return corpus


#########################################
# Character indexes
#########################################

def _entry(char: CorpusCharacter, key: Optional[str] = None) -> IndexEntry:
    return IndexEntry(
        key=char.id if key is None else key,
        id=char.id,
        character=char.character,
        radical=char.radical,
        stroke_count=char.stroke_count,
        jyutping=char.jyutping,
        in_lexical_lists_hk=char.in_lexical_lists_hk,
    )


def _by_id(entries: List[IndexEntry]) -> Tuple[IndexEntry, ...]:
    return tuple(sorted(entries, key=lambda e: e.id))


def build_all_index(corpus: Sequence[CorpusCharacter]) -> Tuple[IndexEntry, ...]:
    return _by_id([_entry(c) for c in corpus])


def build_lexical_list_index(corpus: Sequence[CorpusCharacter]) -> Tuple[IndexEntry, ...]:
    return _by_id([_entry(c) for c in corpus if c.in_lexical_lists_hk])


def build_stroke_index(corpus: Sequence[CorpusCharacter]) -> List[IndexGroup]:
    """Groups keyed 1..32; characters outside that range are left out."""
    by_strokes: Dict[int, List[IndexEntry]] = {}
    for char in corpus:
        if 0 < char.stroke_count <= MAX_STROKES:
            by_strokes.setdefault(char.stroke_count, []).append(_entry(char, str(char.stroke_count)))
    return [
        IndexGroup(key=strokes, entries=_by_id(by_strokes[strokes]))
        for strokes in range(1, MAX_STROKES + 1)
        if strokes in by_strokes
    ]


def build_radical_index(corpus: Sequence[CorpusCharacter]) -> List[IndexGroup]:
    """Groups keyed by radical, ordered by the radical's stroke count then by the radical itself."""
    by_radical: Dict[str, List[IndexEntry]] = {}
    for char in corpus:
        if char.radical:
            by_radical.setdefault(char.radical, []).append(_entry(char, char.radical))
    ordered = sorted(by_radical, key=lambda r: (radical_stroke_count(r), r))
    return [IndexGroup(key=r, entries=_by_id(by_radical[r])) for r in ordered]


#########################################
# Word index
#########################################

def build_stage_index(corpus: Sequence[CorpusCharacter]) -> List[IndexGroup]:
    """Stage 1 and 2 words across the corpus; the first character (by id) listing a word owns it."""
    groups: List[IndexGroup] = []
    for stage, attr in (("1", "stage1_words"), ("2", "stage2_words")):
        seen = set()
        entries: List[WordIndexEntry] = []
        for char in sorted(corpus, key=lambda c: c.id):
            for w in getattr(char, attr):
                if w.word in seen:
                    continue
                seen.add(w.word)
                entries.append(WordIndexEntry(
                    word=w.word,
                    jyutping=w.jyutping or "",
                    pinyin=w.pinyin or "",
                    character_id=char.id,
                    character=char.character,
                ))
        entries.sort(key=lambda e: e.word)
        groups.append(IndexGroup(key=stage, entries=tuple(entries)))
    return groups


#########################################
# Summary and output
#########################################

def build_summary(
    corpus: Sequence[CorpusCharacter],
    lexical: Sequence[IndexEntry],
    strokes: Sequence[IndexGroup],
    radicals: Sequence[IndexGroup],
    stages: Sequence[IndexGroup],
) -> Dict[str, Any]:
    radical_histogram: Dict[int, int] = {}
    for group in radicals:
        n = radical_stroke_count(group.key)
        radical_histogram[n] = radical_histogram.get(n, 0) + 1
    return {
        "totalCharacters": len(corpus),
        "lexicalListsHKCount": len(lexical),
        "stage1WordCount": len(stages[0].entries),
        "stage2WordCount": len(stages[1].entries),
        "strokeCounts": [{"strokes": g.key, "count": len(g.entries)} for g in strokes],
        "radicalCounts": [
            {"strokes": n, "radicalCount": radical_histogram[n]}
            for n in sorted(radical_histogram)
        ],
    }


def build_indexes(corpus: Sequence[CorpusCharacter]) -> Dict[str, Dict[str, Any]]:
    """Every index file's content, keyed by file name."""
    all_entries = build_all_index(corpus)
    lexical = build_lexical_list_index(corpus)
    strokes = build_stroke_index(corpus)
    radicals = build_radical_index(corpus)
    stages = build_stage_index(corpus)
    return {
        "all.json": {"entries": [e.to_dict() for e in all_entries]},
        "lexical-lists-hk.json": {"entries": [e.to_dict() for e in lexical]},
        "strokes.json": {"groups": [g.to_dict() for g in strokes]},
        "radical.json": {"groups": [g.to_dict() for g in radicals]},
        "stage.json": {"groups": [g.to_dict() for g in stages]},
        "summary.json": build_summary(corpus, lexical, strokes, radicals, stages),
    }


def write_indexes(indexes_dir: Path, indexes: Dict[str, Dict[str, Any]], verbose: bool = False) -> List[Path]:
    """Overwrite each index file whole."""
    written: List[Path] = []
    for name in INDEX_FILES:
        path = indexes_dir / name
        write_text_atomic(path, dump_json(indexes[name]))
        written.append(path)
        if verbose:
            print(f"[index] [file] {name}")
    return written


def rebuild_indexes(records_dir: Path, indexes_dir: Path, verbose: bool = False) -> Dict[str, Dict[str, Any]]:
    """Load the corpus, build every index, and write them out."""
    corpus = load_corpus(records_dir, verbose=verbose)
    indexes = build_indexes(corpus)
    write_indexes(indexes_dir, indexes, verbose=verbose)
    if verbose:
        summary = indexes["summary.json"]
        print(f"[index] [ok] {summary['totalCharacters']} characters, "
              f"{summary['stage1WordCount']} stage 1 words, {summary['stage2WordCount']} stage 2 words")
    return indexes
