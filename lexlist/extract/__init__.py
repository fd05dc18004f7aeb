"""Page extractors and record assembly."""

from lexlist.extract.page import CharacterPage
from lexlist.extract.metadata import extract_metadata
from lexlist.extract.vocabulary import (
    extract_vocabulary,
    extract_primary_word_list,
    extract_section,
    dedupe_words,
)
from lexlist.extract.animation import (
    AnimationTimeline,
    decode_timeline,
    decode_stroke_vectors,
    infer_stroke_numbers,
    parse_shape_catalogue,
    parse_shape_timeline,
    parse_text_timeline,
)
from lexlist.extract.assembler import (
    assemble_record,
    extract_record,
    in_lexical_list,
    stroke_order_urls,
    animation_script_url,
)

__all__ = [
    # page
    "CharacterPage",
    # metadata
    "extract_metadata",
    # vocabulary
    "extract_vocabulary",
    "extract_primary_word_list",
    "extract_section",
    "dedupe_words",
    # animation
    "AnimationTimeline",
    "decode_timeline",
    "decode_stroke_vectors",
    "infer_stroke_numbers",
    "parse_shape_catalogue",
    "parse_shape_timeline",
    "parse_text_timeline",
    # assembler
    "assemble_record",
    "extract_record",
    "in_lexical_list",
    "stroke_order_urls",
    "animation_script_url",
]
