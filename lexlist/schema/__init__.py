"""Record data model and basic shape validation."""

from lexlist.schema.record import (
    Anchor,
    ShapeDefinition,
    TimelineEntry,
    TimelineGroup,
    StrokeLabel,
    StrokeVector,
    WordEntry,
    CharacterMetadata,
    VocabularyLists,
    CharacterRecord,
    RECORD_LIST_FIELDS,
)
from lexlist.schema.validation import normalize_record_dict, validate_record_dict

__all__ = [
    # record
    "Anchor",
    "ShapeDefinition",
    "TimelineEntry",
    "TimelineGroup",
    "StrokeLabel",
    "StrokeVector",
    "WordEntry",
    "CharacterMetadata",
    "VocabularyLists",
    "CharacterRecord",
    "RECORD_LIST_FIELDS",
    # validation
    "normalize_record_dict",
    "validate_record_dict",
]
