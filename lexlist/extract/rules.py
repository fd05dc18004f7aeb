"""Named extraction rules.

Each heuristic used to read the pages is a small rule object with its own
fallback chain, so every chain can be exercised on its own.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Tuple

from bs4 import Tag  # type: ignore

from lexlist.common.utils import first_cjk_char
from lexlist.extract.page import CharacterPage, cell_text, own_text, value_below
from lexlist.extract.pronunciation import (
    JYUTPING_SYLLABLE,
    PINYIN_LETTERS,
    PINYIN_STRICT,
)


LEXICAL_LIST_TITLE = "小學學習字詞表"
APPENDIX_MARKER = "附表"
EXCLUSION_MARKERS = ("此字屬《常用字字形表》", "而不入《香港小學學習字詞表》")


#########################################
# Labelled metadata (radical, stroke count)
#########################################

def parse_radical(text: str) -> Optional[str]:
    """"水部" -> "水"; text without a CJK character loses a trailing 部."""
    text = text.strip()
    if not text:
        return None
    ch = first_cjk_char(text[:1])
    if ch:
        return ch
    value = re.sub(r"部$", "", text).strip()
    return value or None


def parse_stroke_count(text: str) -> Optional[int]:
    """"4 畫" -> 4."""
    m = re.search(r"(\d+)", text)
    return int(m.group(1)) if m else None


@dataclass(frozen=True)
class LabelRule:
    """Value found under an exactly-labelled table cell, else by a free-text pattern."""
    name: str
    label: str
    parse: Callable[[str], object]
    text_pattern: Pattern

    def label_cells(self, page: CharacterPage) -> List[Tag]:
        return [c for c in page.soup.find_all(["td", "th"]) if cell_text(c) == self.label]

    def from_table(self, page: CharacterPage) -> Optional[object]:
        """Read the same column of the row right after the label row."""
        for cell in self.label_cells(page):
            below = value_below(cell)
            if below is None:
                continue
            value = self.parse(cell_text(below))
            if value:
                return value
        return None

    def from_text(self, page: CharacterPage) -> Optional[object]:
        m = self.text_pattern.search(page.text)
        if not m:
            return None
        return self.parse(m.group(1)) or None

    def apply(self, page: CharacterPage) -> Optional[object]:
        value = self.from_table(page)
        if value is None:
            value = self.from_text(page)
        return value


RADICAL_RULE = LabelRule(
    name="radical",
    label="部首",
    parse=parse_radical,
    text_pattern=re.compile(r"部首[：:]\s*([\u4e00-\u9fff])"),
)

STROKE_COUNT_RULE = LabelRule(
    name="strokeCount",
    label="總筆畫數",
    parse=parse_stroke_count,
    text_pattern=re.compile(r"(?:總筆畫數|筆畫)[：:]\s*(\d+)"),
)


#########################################
# Character pronunciation
#########################################

def _leading_jyutping(text: str) -> Optional[str]:
    m = re.match(rf"^\s*({JYUTPING_SYLLABLE.pattern})", text, re.IGNORECASE)
    return m.group(1).lower() if m else None


def _leading_pinyin(text: str) -> Optional[str]:
    parts = text.split()
    token = parts[0].strip() if parts else ""
    return token if token and PINYIN_STRICT.match(token) else None


@dataclass(frozen=True)
class PronunciationRule:
    """Layered lookup for one romanization of the character itself.

    1. a dedicated styled element holding only the reading;
    2. the cell under a header cell (e.g. "粵語"), read through the same element;
    3. a permissive pattern over the whole page text.
    """
    name: str
    styled_selector: str
    header_label: str
    header_value_selector: str
    own_text_only: bool
    first_only: bool
    parse: Callable[[str], Optional[str]]
    text_pattern: Pattern

    def _read(self, tag: Tag) -> Optional[str]:
        text = own_text(tag) if self.own_text_only else cell_text(tag)
        return self.parse(text)

    def from_styled(self, page: CharacterPage) -> Optional[str]:
        for tag in page.soup.select(self.styled_selector):
            value = self._read(tag)
            if value:
                return value
            if self.first_only:
                # Only the first styled element belongs to the character itself.
                return None
        return None

    def from_header(self, page: CharacterPage) -> Optional[str]:
        for cell in page.soup.find_all(["td", "th"]):
            if cell_text(cell) != self.header_label:
                continue
            below = value_below(cell)
            if below is None:
                return None
            target = below.select_one(self.header_value_selector)
            return self._read(target) if target is not None else None
        return None

    def from_text(self, page: CharacterPage) -> Optional[str]:
        m = self.text_pattern.search(page.text)
        return m.group(1).strip() if m else None

    def apply(self, page: CharacterPage) -> Optional[str]:
        for step in (self.from_styled, self.from_header, self.from_text):
            value = step(page)
            if value:
                return value
        return None


JYUTPING_RULE = PronunciationRule(
    name="jyutping",
    styled_selector="span.jyutping12 strong",
    header_label="粵語",
    header_value_selector="span.jyutping12 strong",
    own_text_only=False,
    first_only=False,
    parse=_leading_jyutping,
    text_pattern=re.compile(r"粵語(?:字音|讀音)[：:]?\s*([a-z]+[1-6])"),
)

PINYIN_RULE = PronunciationRule(
    name="pinyin",
    styled_selector="td.pinyin12 strong",
    header_label="普通話",
    header_value_selector="strong",
    own_text_only=True,
    first_only=True,
    parse=_leading_pinyin,
    text_pattern=re.compile(rf"普通話(?:字音|讀音)[：:]\s*([{PINYIN_LETTERS}]+)"),
)


#########################################
# Vocabulary sections
#########################################

MODE_PLAIN = "plain"
MODE_PRONOUNCED = "pronounced"
MODE_TRANSLITERATED = "transliterated"

APPENDIX_HEADERS = ("附表一", "附表二", "附表三", "附表四", "附表五")
HEADER_WORDS = ("學習階段", LEXICAL_LIST_TITLE, APPENDIX_MARKER)
MAX_WORD_LENGTH = 50
MAX_FOLLOWING_TABLES = 10


@dataclass(frozen=True)
class SectionRule:
    """One appendix category and how its words are read."""
    key: str
    title: str
    mode: str

    def is_header_text(self, text: str) -> bool:
        """The real section header names the category together with the appendix or the list."""
        return self.title in text and (APPENDIX_MARKER in text or LEXICAL_LIST_TITLE in text)

    def starts_other_section(self, table_text: str, boundaries: Tuple[str, ...]) -> bool:
        """A following table that opens a different section ends this one."""
        if self.title in table_text:
            return False
        return any(marker in table_text for marker in boundaries)


SECTION_RULES = (
    SectionRule("fourCharacterPhrases", "四字詞語", MODE_PLAIN),
    SectionRule("classicalPhrases", "文言詞語", MODE_PRONOUNCED),
    SectionRule("multiCharacterIdioms", "多字熟語", MODE_PLAIN),
    SectionRule("properNouns", "專名術語", MODE_PRONOUNCED),
    SectionRule("transliteratedWords", "音譯外來詞語", MODE_TRANSLITERATED),
)

SECTION_BOUNDARIES = APPENDIX_HEADERS + tuple(rule.title for rule in SECTION_RULES)


def is_primary_list_text(table_text: str) -> bool:
    """The primary word list names the list but is not one of its appendices."""
    return LEXICAL_LIST_TITLE in table_text and APPENDIX_MARKER not in table_text


def has_exclusion_marker(page_text: str) -> bool:
    """The page states that the character is outside the primary-school list."""
    return all(marker in page_text for marker in EXCLUSION_MARKERS)


def is_header_word(word: str) -> bool:
    return word == "詞語" or any(h in word for h in HEADER_WORDS)
