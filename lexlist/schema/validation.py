"""Basic shape checks for stored character records."""

from typing import Any, Dict, List

from lexlist.schema.record import RECORD_LIST_FIELDS


def normalize_record_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map legacy keys (word, strokes) onto the current record keys."""
    out = dict(data)
    if not out.get("character") and out.get("word"):
        out["character"] = out["word"]
    if not out.get("strokeCount") and out.get("strokes"):
        out["strokeCount"] = out["strokes"]
    return out


def validate_record_dict(data: Any) -> List[str]:
    """Return a list of shape problems; empty means the record is usable."""
    if not isinstance(data, dict):
        return ["Record must be a JSON object"]
    errors: List[str] = []
    if not isinstance(data.get("id"), str) or not data.get("id"):
        errors.append("id must be a non-empty string")
    if not isinstance(data.get("character"), str) or not data.get("character"):
        errors.append("character must be a non-empty string")
    stroke_count = data.get("strokeCount", 0)
    if stroke_count is not None and (isinstance(stroke_count, bool) or not isinstance(stroke_count, int) or stroke_count < 0):
        errors.append("strokeCount must be a non-negative integer")
    for key in ("radical", "jyutping", "pinyin"):
        if data.get(key) is not None and not isinstance(data.get(key), str):
            errors.append(f"{key} must be a string")
    for key in RECORD_LIST_FIELDS:
        if data.get(key) is not None and not isinstance(data.get(key), list):
            errors.append(f"{key} must be a list")
    for key in ("stage1Words", "stage2Words"):
        for item in data.get(key) or []:
            if not isinstance(item, dict) or not isinstance(item.get("word"), str):
                errors.append(f"{key} entries must be objects with a word")
                break
    return errors
