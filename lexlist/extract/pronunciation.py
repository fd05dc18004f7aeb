"""Romanization patterns and word-row pronunciation parsing.

Two systems appear on the pages:
- Jyutping (Cantonese): plain ASCII syllables each ending in a tone digit 1-6, e.g. "jat1", "ing4zo6".
- Pinyin (Mandarin): letters that may carry tone diacritics, e.g. "yī", "chéngzuò", "Fùshì Shān".
They are told apart by character class: ASCII+digit versus diacritic-bearing letters.
"""

import re
from typing import Dict, Optional

from bs4 import Tag  # type: ignore

from lexlist.common.utils import _clean_value
from lexlist.extract.page import cell_text


PINYIN_LETTERS = "a-zA-ZāáǎàēéěèīíǐìōóǒòūúǔùǖǘǚǜüĀÁǍÀĒÉĚÈĪÍǏÌŌÓǑÒŪÚǓÙÜɑɛŋŊ\u0300-\u036f"

JYUTPING_SYLLABLE = re.compile(r"[a-z]+[1-6]")
JYUTPING_WORD = re.compile(r"^(?:[a-z]+[1-6])+$")
PINYIN_WORD = re.compile(rf"^[{PINYIN_LETTERS}]+[0-9]?$")
PINYIN_STRICT = re.compile(rf"^[{PINYIN_LETTERS}]+$")

_LABEL_PINYIN = "普通話讀音"
_LABEL_JYUTPING = "粵語讀音"
_LABEL_PLAY = "播放讀音"

_PINYIN_AFTER_LABEL = re.compile(rf"{_LABEL_PINYIN}\s*([{PINYIN_LETTERS}\s]+?)(?:\s*{_LABEL_PLAY}|$)")
_JYUTPING_AFTER_LABEL = re.compile(rf"{_LABEL_JYUTPING}\s*([a-z\s]+[0-9]+(?:\s+[a-z]+[0-9]+)*)")
_PINYIN_LEADING = re.compile(rf"^[{PINYIN_LETTERS}\s]+")
_JYUTPING_LEADING = re.compile(r"^[a-z\s]+[0-9]+(?:\s*[a-z]+[0-9]+)*")
_TOKEN_SPLIT = re.compile(r"[\s()（）]+")


def is_jyutping(token: str) -> bool:
    """ASCII syllables each closed by a tone digit."""
    return bool(JYUTPING_WORD.match(token))


def is_pinyin(token: str) -> bool:
    """Letters (diacritics allowed), optionally one trailing tone digit, and not Jyutping."""
    return bool(PINYIN_WORD.match(token)) and not is_jyutping(token)


def _squash(text: str) -> str:
    return re.sub(r"\s+", "", text)


def parse_pinyin_block(text: str) -> Optional[str]:
    """Pinyin from a styled pinyin block; multi-word readings keep their spaces."""
    text = text.strip()
    if not text:
        return None
    m = _PINYIN_AFTER_LABEL.search(text)
    if m and m.group(1).strip():
        return re.sub(r"\s+", " ", m.group(1).strip())
    cleaned = text.replace(_LABEL_PINYIN, "").split(_LABEL_PLAY)[0].strip()
    m = _PINYIN_LEADING.match(cleaned)
    if m and m.group(0).strip():
        return re.sub(r"\s+", " ", m.group(0).strip())
    return None


def parse_jyutping_block(text: str) -> Optional[str]:
    """Jyutping from a styled jyutping block; alternate readings in [brackets] are dropped."""
    text = text.strip()
    if not text:
        return None
    m = _JYUTPING_AFTER_LABEL.search(text)
    if m:
        return _squash(m.group(1).split("[")[0]) or None
    cleaned = text.replace(_LABEL_JYUTPING, "").replace(_LABEL_PLAY, "").split("[")[0].strip()
    m = _JYUTPING_LEADING.match(cleaned)
    if m:
        return _squash(m.group(0)) or None
    return None


def pronunciations_from_text(text: str) -> Dict[str, str]:
    """Permissive fallback over free text: classify tokens as Jyutping or Pinyin.

    Labelled forms ("普通話讀音 yī", "粵語讀音 jat1") win. Otherwise only the text
    before the first "[" is read (brackets hold alternate readings), consecutive
    Jyutping tokens are joined, and the first Pinyin-looking token is taken.
    """
    result: Dict[str, str] = {}
    if not text:
        return result

    m = re.search(rf"{_LABEL_PINYIN}\s+([{PINYIN_LETTERS}\s]+[0-9]?)(?:{_LABEL_PLAY}|$)", text)
    if m and m.group(1).strip():
        result["pinyin"] = _squash(m.group(1))
    m = re.search(rf"{_LABEL_JYUTPING}\s+([a-z\s]+[0-9]+)", text)
    if m:
        result["jyutping"] = _squash(m.group(1))
    if "jyutping" in result and "pinyin" in result:
        return result

    head = text.split("[")[0]
    for label in (_LABEL_PINYIN, _LABEL_JYUTPING, _LABEL_PLAY, "普通話", "粵語"):
        head = head.replace(label, " ")
    jyutping_run = []
    for token in (t for t in _TOKEN_SPLIT.split(head) if t):
        if is_jyutping(token):
            jyutping_run.append(token)
            continue
        if jyutping_run:
            break
        if "pinyin" not in result and is_pinyin(token):
            result["pinyin"] = token
    if "jyutping" not in result and jyutping_run:
        result["jyutping"] = "".join(jyutping_run)
    return result


def row_pronunciations(row: Tag) -> Dict[str, str]:
    """Pronunciations for one word row: styled blocks first, then the row text."""
    result: Dict[str, str] = {}
    pinyin_div = row.select_one("div.pinyinGreen, div.pinyinPurple")
    if pinyin_div is not None:
        pinyin = parse_pinyin_block(cell_text(pinyin_div))
        if pinyin:
            result["pinyin"] = pinyin
    jyutping_div = row.select_one("div.jyutpingGreen, div.jyutpingPurple")
    if jyutping_div is not None:
        jyutping = parse_jyutping_block(cell_text(jyutping_div))
        if jyutping:
            result["jyutping"] = jyutping
    if not result:
        result = pronunciations_from_text(_clean_value(row.get_text(" ")))
    return result
