"""Record types produced by the extraction pipeline.

All types are frozen: a record is built once per successful extraction pass
and is only ever replaced wholesale by a later crawl.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Anchor:
    """Translation applied to a shape's path (CreateJS setTransform x/y)."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class ShapeDefinition:
    """One drawable shape from an animation script."""
    name: str
    path_data: str
    anchor: Anchor
    color: str


@dataclass(frozen=True)
class TimelineEntry:
    """A shape made visible by a tween block, with its wait relative to the previous entry."""
    shape_ref: str
    relative_wait: int


@dataclass(frozen=True)
class TimelineGroup:
    """All entries of one tween block: the drawing schedule of one candidate stroke."""
    entries: Tuple[TimelineEntry, ...]

    def absolute_frames(self) -> List[int]:
        """Prefix sums of the relative waits."""
        frames: List[int] = []
        running = 0
        for entry in self.entries:
            running += entry.relative_wait
            frames.append(running)
        return frames

    @property
    def first_frame(self) -> int:
        frames = self.absolute_frames()
        return frames[0] if frames else 0


@dataclass(frozen=True)
class StrokeLabel:
    """A stroke-number label and the frame at which it becomes visible."""
    stroke: int
    frame: int


@dataclass(frozen=True)
class StrokeVector:
    """One reconstructed segment of one stroke."""
    stroke_number: int
    segment: int
    frame: int
    path_data: str
    anchor: Anchor
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strokeNumber": self.stroke_number,
            "segment": self.segment,
            "frame": self.frame,
            "pathData": self.path_data,
            "anchor": self.anchor.to_dict(),
            "color": self.color,
        }


@dataclass(frozen=True)
class WordEntry:
    """A word or phrase listed on a character page."""
    word: str
    jyutping: Optional[str] = None
    pinyin: Optional[str] = None
    stage: Optional[str] = None  # "1" or "2" for the primary word list
    foreign_word: Optional[str] = None  # transliterated words only

    def to_dict(self) -> Dict[str, str]:
        data = {"word": self.word}
        if self.jyutping:
            data["jyutping"] = self.jyutping
        if self.pinyin:
            data["pinyin"] = self.pinyin
        if self.stage:
            data["stage"] = self.stage
        if self.foreign_word:
            data["foreignWord"] = self.foreign_word
        return data


@dataclass(frozen=True)
class CharacterMetadata:
    """Best-effort metadata for the character itself; None means not found."""
    radical: Optional[str] = None
    stroke_count: Optional[int] = None
    jyutping: Optional[str] = None
    pinyin: Optional[str] = None


@dataclass(frozen=True)
class VocabularyLists:
    """The seven word/phrase categories found on a page."""
    stage1_words: Tuple[WordEntry, ...] = ()
    stage2_words: Tuple[WordEntry, ...] = ()
    four_character_phrases: Tuple[WordEntry, ...] = ()
    classical_phrases: Tuple[WordEntry, ...] = ()
    multi_character_idioms: Tuple[WordEntry, ...] = ()
    proper_nouns: Tuple[WordEntry, ...] = ()
    transliterated_words: Tuple[WordEntry, ...] = ()


@dataclass(frozen=True)
class CharacterRecord:
    """The assembled, immutable per-character record."""
    id: str
    character: str
    source_url: str = ""
    radical: str = ""
    stroke_count: int = 0
    jyutping: str = ""
    pinyin: str = ""
    stroke_order_images: Tuple[str, ...] = ()
    stroke_vectors: Tuple[StrokeVector, ...] = ()
    in_lexical_lists_hk: bool = False
    vocabulary: VocabularyLists = field(default_factory=VocabularyLists)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the stable key order of the record files."""
        v = self.vocabulary
        return {
            "id": self.id,
            "character": self.character,
            "sourceUrl": self.source_url,
            "radical": self.radical,
            "strokeCount": self.stroke_count,
            "jyutping": self.jyutping,
            "pinyin": self.pinyin,
            "strokeOrderImages": list(self.stroke_order_images),
            "strokeVectors": [s.to_dict() for s in self.stroke_vectors],
            "inLexicalListsHK": self.in_lexical_lists_hk,
            "stage1Words": [w.to_dict() for w in v.stage1_words],
            "stage2Words": [w.to_dict() for w in v.stage2_words],
            "fourCharacterPhrases": [w.to_dict() for w in v.four_character_phrases],
            "classicalPhrases": [w.to_dict() for w in v.classical_phrases],
            "multiCharacterIdioms": [w.to_dict() for w in v.multi_character_idioms],
            "properNouns": [w.to_dict() for w in v.proper_nouns],
            "transliteratedWords": [w.to_dict() for w in v.transliterated_words],
        }


RECORD_LIST_FIELDS = (
    "strokeOrderImages",
    "strokeVectors",
    "stage1Words",
    "stage2Words",
    "fourCharacterPhrases",
    "classicalPhrases",
    "multiCharacterIdioms",
    "properNouns",
    "transliteratedWords",
)
