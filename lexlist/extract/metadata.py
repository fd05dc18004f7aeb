"""Radical, stroke count, and character pronunciations."""

from typing import Optional

from lexlist.common.logging import log_debug
from lexlist.extract.page import CharacterPage
from lexlist.extract.rules import JYUTPING_RULE, PINYIN_RULE, RADICAL_RULE, STROKE_COUNT_RULE
from lexlist.schema.record import CharacterMetadata


def extract_metadata(page: CharacterPage, debug: bool = False) -> CharacterMetadata:
    """Best-effort metadata; any field that cannot be located stays None."""
    radical: Optional[str] = RADICAL_RULE.apply(page)  # type: ignore[assignment]
    stroke_count: Optional[int] = STROKE_COUNT_RULE.apply(page)  # type: ignore[assignment]
    jyutping = JYUTPING_RULE.apply(page)
    pinyin = PINYIN_RULE.apply(page)
    log_debug(debug, f"metadata radical={radical!r} strokes={stroke_count!r} jyutping={jyutping!r} pinyin={pinyin!r}")
    return CharacterMetadata(
        radical=radical,
        stroke_count=stroke_count,
        jyutping=jyutping,
        pinyin=pinyin,
    )
