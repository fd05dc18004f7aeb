"""Merge extractor outputs into one CharacterRecord."""

import re
from typing import Callable, List, Optional, Sequence

from lexlist.common.utils import unique_preserve_order
from lexlist.extract.animation import decode_stroke_vectors
from lexlist.extract.metadata import extract_metadata
from lexlist.extract.page import CharacterPage, cell_text
from lexlist.extract.rules import has_exclusion_marker, is_primary_list_text
from lexlist.extract.vocabulary import extract_vocabulary
from lexlist.schema.record import (
    CharacterMetadata,
    CharacterRecord,
    StrokeVector,
    VocabularyLists,
)


ANIMATION_MARKER = "stkdemo_js"

# Resolves a host-relative src to an absolute URL.
UrlResolver = Callable[[str], str]
# Returns the animation script text for a script URL.
ScriptLoader = Callable[[str], str]


def stroke_order_urls(page: CharacterPage, resolve: UrlResolver) -> List[str]:
    """Animation iframes first, then stroke-order images, deduplicated."""
    urls: List[str] = []
    for frame in page.soup.find_all("iframe"):
        src = frame.get("src") or ""
        if ANIMATION_MARKER in src:
            urls.append(resolve(src))
    for img in page.soup.find_all("img"):
        src = img.get("src") or ""
        alt = img.get("alt") or ""
        if src and ("stroke" in src or "筆順" in src or "筆順" in alt):
            urls.append(resolve(src))
    return unique_preserve_order(urls)


def animation_script_url(animation_url: str) -> str:
    """The script sits next to the animation page with a .js extension."""
    return re.sub(r"\.html(?=$|[?#])", ".js", animation_url, count=1)


def animation_urls(urls: Sequence[str]) -> List[str]:
    return [u for u in urls if ANIMATION_MARKER in u]


def has_primary_word_list(page: CharacterPage) -> bool:
    """A non-appendix table or heading names the primary word list."""
    if any(is_primary_list_text(cell_text(t)) for t in page.tables()):
        return True
    for tag in page.soup.find_all(["h3", "h4", "th"]):
        if is_primary_list_text(cell_text(tag)):
            return True
    return False


def in_lexical_list(page: CharacterPage) -> bool:
    """The exclusion sentence wins over any primary-list table."""
    if has_exclusion_marker(page.text):
        return False
    return has_primary_word_list(page)


def assemble_record(
    character_id: str,
    character: str,
    source_url: str,
    metadata: CharacterMetadata,
    vocabulary: VocabularyLists,
    stroke_vectors: Sequence[StrokeVector] = (),
    stroke_order_images: Sequence[str] = (),
    in_lexical_lists_hk: bool = False,
) -> CharacterRecord:
    """Build the record; absent values become "", 0, or empty lists, never None.

    A character outside the lexical list has no staged words, whatever tables
    the page carries.
    """
    if not in_lexical_lists_hk:
        vocabulary = VocabularyLists(
            four_character_phrases=vocabulary.four_character_phrases,
            classical_phrases=vocabulary.classical_phrases,
            multi_character_idioms=vocabulary.multi_character_idioms,
            proper_nouns=vocabulary.proper_nouns,
            transliterated_words=vocabulary.transliterated_words,
        )
    return CharacterRecord(
        id=character_id,
        character=character,
        source_url=source_url or "",
        radical=metadata.radical or "",
        stroke_count=metadata.stroke_count or 0,
        jyutping=metadata.jyutping or "",
        pinyin=metadata.pinyin or "",
        stroke_order_images=tuple(stroke_order_images),
        stroke_vectors=tuple(stroke_vectors),
        in_lexical_lists_hk=bool(in_lexical_lists_hk),
        vocabulary=vocabulary,
    )


def extract_record(
    character_id: str,
    character: str,
    html: str,
    source_url: str,
    resolve: UrlResolver,
    load_script: Optional[ScriptLoader] = None,
    verbose: bool = False,
    debug: bool = False,
) -> CharacterRecord:
    """Run every extractor over one page and assemble the record.

    load_script fetches an animation script; when it is None or raises, the
    record is still built, just without stroke vectors.
    """
    page = CharacterPage(html)
    metadata = extract_metadata(page, debug=debug)
    vocabulary = extract_vocabulary(page, debug=debug)
    images = stroke_order_urls(page, resolve)

    vectors: List[StrokeVector] = []
    if load_script is not None:
        for url in animation_urls(images):
            script_url = animation_script_url(url)
            try:
                script = load_script(script_url)
            except Exception as e:  # noqa: BLE001
                if verbose:
                    print(f"[extract] [skip] animation script unavailable: {script_url} ({e})")
                continue
            vectors = decode_stroke_vectors(script, debug=debug)
            if vectors:
                break

    return assemble_record(
        character_id=character_id,
        character=character,
        source_url=source_url,
        metadata=metadata,
        vocabulary=vocabulary,
        stroke_vectors=vectors,
        stroke_order_images=images,
        in_lexical_lists_hk=in_lexical_list(page),
    )
