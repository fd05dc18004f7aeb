"""Word and phrase lists: the staged primary word list plus five appendix categories."""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import Tag  # type: ignore

from lexlist.common.logging import log_debug
from lexlist.extract.page import CharacterPage, cell_lines, cell_text, owning_table, row_cells
from lexlist.extract.pronunciation import row_pronunciations
from lexlist.extract.rules import (
    LEXICAL_LIST_TITLE,
    MAX_FOLLOWING_TABLES,
    MAX_WORD_LENGTH,
    MODE_PLAIN,
    MODE_TRANSLITERATED,
    SECTION_BOUNDARIES,
    SECTION_RULES,
    SectionRule,
    is_header_word,
    is_primary_list_text,
)
from lexlist.schema.record import VocabularyLists, WordEntry


_THREE_CJK_RUNS = re.compile(r"^[\u4e00-\u9fff]+\s+[\u4e00-\u9fff]+\s+[\u4e00-\u9fff]+")
_LATIN_WORDS = re.compile(r"^[A-Za-z\s]+$")


def dedupe_words(words: Iterable[WordEntry]) -> Tuple[WordEntry, ...]:
    """Keep the first entry for each word text, preserving order."""
    seen = set()
    out: List[WordEntry] = []
    for w in words:
        if w.word not in seen:
            seen.add(w.word)
            out.append(w)
    return tuple(out)


def _valid_word(word: str) -> bool:
    return 0 < len(word) <= MAX_WORD_LENGTH and not is_header_word(word)


def _is_header_row(row: Tag, row_text: str) -> bool:
    if not row_text or row.find("th") is not None:
        return True
    looks_like_words = bool(_THREE_CJK_RUNS.match(row_text))
    if "學習階段" in row_text and not looks_like_words:
        return True
    if "詞語顯示" in row_text:
        return True
    return LEXICAL_LIST_TITLE in row_text and not looks_like_words


def _row_stage(row: Tag, default: Optional[str]) -> Optional[str]:
    """Stage marker from the row's last cell ("1" or "2")."""
    cells = [c for c in row_cells(row) if c.name == "td"]
    if cells:
        last = cell_text(cells[-1])
        if last in ("1", "2"):
            return last
    return default


def words_from_rows(table: Tag, stage: Optional[str] = None) -> List[WordEntry]:
    """Word rows with pronunciations: a row counts only if it has a word cell (td.ci)."""
    words: List[WordEntry] = []
    for row in table.find_all("tr"):
        row_text = cell_text(row)
        if _is_header_row(row, row_text):
            continue
        word_cell = row.find("td", class_="ci")
        if word_cell is None:
            continue
        word = cell_text(word_cell)
        if not _valid_word(word):
            continue
        readings = row_pronunciations(row)
        words.append(WordEntry(
            word=word,
            jyutping=readings.get("jyutping"),
            pinyin=readings.get("pinyin"),
            stage=_row_stage(row, stage),
        ))
    return words


def words_from_cells(table: Tag) -> List[WordEntry]:
    """Bare words from word cells; one cell may hold several entries on separate lines."""
    words: List[WordEntry] = []
    for cell in table.find_all("td", class_="ci"):
        for line in cell_lines(cell):
            if _valid_word(line):
                words.append(WordEntry(word=line))
    return words


def _latin_text(cell: Optional[Tag]) -> Optional[str]:
    if cell is None:
        return None
    text = cell_text(cell)
    if text and len(text) < MAX_WORD_LENGTH and _LATIN_WORDS.match(text):
        return re.sub(r"\s+", " ", text)
    return None


def _foreign_word(row: Tag) -> Optional[str]:
    """Source-language word: the row's eng cell, the previous row's eng cell, or any Latin-only cell."""
    found = _latin_text(row.find("td", class_="eng"))
    if found:
        return found
    prev = row.find_previous_sibling("tr")
    if prev is not None:
        found = _latin_text(prev.find("td", class_="eng"))
        if found:
            return found
    for cell in row.find_all("td"):
        text = cell_text(cell)
        if re.search(r"\d", text) or text.startswith(("普通話", "粵語", "播放")):
            continue
        found = _latin_text(cell)
        if found:
            return found
    return None


def transliterated_from_rows(table: Tag, title: str) -> List[WordEntry]:
    """Transliterated words with readings and the foreign word they render."""
    words: List[WordEntry] = []
    for row in table.find_all("tr"):
        row_text = cell_text(row)
        if not row_text or title in row_text or "附表" in row_text or row.find("th") is not None:
            continue
        word_cell = row.find("td", class_="ci")
        if word_cell is None:
            continue
        word = cell_text(word_cell)
        if not _valid_word(word):
            continue
        readings = row_pronunciations(row)
        words.append(WordEntry(
            word=word,
            jyutping=readings.get("jyutping"),
            pinyin=readings.get("pinyin"),
            foreign_word=_foreign_word(row),
        ))
    return words


#########################################
# Primary word list
#########################################

def primary_list_tables(page: CharacterPage) -> List[Tag]:
    """Innermost tables that mention the primary word list without being an appendix."""
    candidates = [t for t in page.tables() if is_primary_list_text(cell_text(t))]
    ids = {id(t) for t in candidates}
    return [
        t for t in candidates
        if not any(id(inner) in ids for inner in t.find_all("table"))
    ]


def extract_primary_word_list(page: CharacterPage) -> Tuple[Tuple[WordEntry, ...], Tuple[WordEntry, ...]]:
    """(stage 1 words, stage 2 words). Rows without a stage marker count as stage 1."""
    stage1: List[WordEntry] = []
    stage2: List[WordEntry] = []
    for table in primary_list_tables(page):
        for word in words_from_rows(table):
            (stage2 if word.stage == "2" else stage1).append(word)
    return dedupe_words(stage1), dedupe_words(stage2)


#########################################
# Appendix sections
#########################################

def section_header_tables(page: CharacterPage, rule: SectionRule) -> List[Tag]:
    """Tables owning an innermost cell that names this section as an appendix or list heading."""
    matches = [c for c in page.soup.find_all(["td", "th"]) if rule.is_header_text(cell_text(c))]
    ids = {id(c) for c in matches}
    tables: List[Tag] = []
    for cell in matches:
        if any(id(inner) in ids for inner in cell.find_all(["td", "th"])):
            continue
        table = owning_table(cell)
        if table is not None and not any(t is table for t in tables):
            tables.append(table)
    return tables


def section_tables(page: CharacterPage, rule: SectionRule) -> List[Tag]:
    """Each header table plus the sibling tables after it, up to the next section."""
    walked: List[Tag] = []
    for header in section_header_tables(page, rule):
        chain = [header]
        nxt = header.find_next_sibling("table")
        while nxt is not None and len(chain) <= MAX_FOLLOWING_TABLES:
            if rule.starts_other_section(cell_text(nxt), SECTION_BOUNDARIES):
                break
            chain.append(nxt)
            nxt = nxt.find_next_sibling("table")
        for table in chain:
            if not any(t is table for t in walked):
                walked.append(table)
    return walked


def extract_section(page: CharacterPage, rule: SectionRule) -> Tuple[WordEntry, ...]:
    """All words of one category; a missing section yields an empty tuple."""
    words: List[WordEntry] = []
    for table in section_tables(page, rule):
        if rule.mode == MODE_PLAIN:
            words.extend(words_from_cells(table))
        elif rule.mode == MODE_TRANSLITERATED:
            words.extend(transliterated_from_rows(table, rule.title))
        else:
            words.extend(words_from_rows(table))
    return dedupe_words(words)


_SECTION_FIELDS: Dict[str, str] = {
    "fourCharacterPhrases": "four_character_phrases",
    "classicalPhrases": "classical_phrases",
    "multiCharacterIdioms": "multi_character_idioms",
    "properNouns": "proper_nouns",
    "transliteratedWords": "transliterated_words",
}


def extract_vocabulary(page: CharacterPage, debug: bool = False) -> VocabularyLists:
    """Run the primary list and every section rule over the page."""
    stage1, stage2 = extract_primary_word_list(page)
    sections = {_SECTION_FIELDS[rule.key]: extract_section(page, rule) for rule in SECTION_RULES}
    if debug:
        counts = ", ".join(f"{k}={len(v)}" for k, v in sections.items())
        log_debug(debug, f"vocabulary stage1={len(stage1)} stage2={len(stage2)} {counts}")
    return VocabularyLists(stage1_words=stage1, stage2_words=stage2, **sections)
