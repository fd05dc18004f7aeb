"""Stroke-order animation decoding.

The animation script is a CreateJS export. Three things are read from it:

- the shape catalogue: ``this.shape_N = new cjs.Shape();`` followed by a
  ``.f("#color")...p("path")`` graphics call and ``setTransform(x, y)``;
- the text timeline: ``cjs.Tween.get(this.text)`` chained with ``wait(n)`` and
  ``to({text:"2"},0)`` calls, which shows the stroke-number label;
- shape timelines: one ``timeline.addTween(...)`` block per stroke, chaining
  ``to({state:[{t:this.shape_N}]},n)`` where n is the wait relative to the
  previous entry of the same block, not an absolute frame.

Assigning stroke numbers to blocks is a heuristic. Blocks are ordered by their
first absolute frame, then matched to the label shown closest to that frame;
a block starting well after the last label is the first stroke drawn over
the guide last; anything else falls back to reverse drawing order. When label
and block counts differ, plain drawing order is used.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from lexlist.common.logging import log_debug
from lexlist.schema.record import (
    Anchor,
    ShapeDefinition,
    StrokeLabel,
    StrokeVector,
    TimelineEntry,
    TimelineGroup,
)


GUIDE_COLOR = "#999999"
DEFAULT_COLOR = "#000000"
MATCH_TOLERANCE = 30  # max frame distance between a block and its label
TRAILING_MARGIN = 20  # frames past the last label that mark the trailing block

_NUMBER = r"-?\d+(?:\.\d+)?"

_SHAPE_RE = re.compile(
    r"this\.(shape(?:_\d+)?)\s*=\s*new\s+cjs\.Shape\(\);"
    r"[^}]*?\.p\(\"([^\"]+)\"\);"
    rf"[^}}]*?setTransform\(({_NUMBER}),\s*({_NUMBER})",
    re.S,
)
_COLOR_RE = re.compile(r"\.f\(\"([^\"]+)\"\)")
_STATE_RE = re.compile(
    r"\.to\(\s*\{\s*state\s*:\s*\[\s*\{\s*t\s*:\s*this\.(shape(?:_\d+)?)\s*\}\s*\]\s*\}\s*,\s*(\d+)\s*\)"
)
_TEXT_TARGET_RE = re.compile(r"Tween\.get\(\s*this\.text(?:_\d+)?\s*\)")
_TEXT_CTOR_RE = re.compile(r"this\.text(?:_\d+)?\s*=\s*new\s+cjs\.Text\(\s*\"(\d+)\"")
_TEXT_TOKEN_RE = re.compile(r"\.wait\(\s*(\d+)\s*\)|\.to\(\s*\{([^}]*)\}")
_TEXT_VALUE_RE = re.compile(r"text\s*:\s*\"(\d+)\"")
_REVEAL_RE = re.compile(r"_off\s*:\s*false")


@dataclass(frozen=True)
class AnimationTimeline:
    """Everything decoded from one script, before stroke numbers are assigned."""
    shapes: Dict[str, ShapeDefinition]
    labels: Tuple[StrokeLabel, ...]
    groups: Tuple[TimelineGroup, ...]


#########################################
# Script scanning
#########################################

def iter_call_blocks(script: str, opener: str = "timeline.addTween(") -> Iterator[str]:
    """Yield each ``opener ... )`` call with balanced parentheses, skipping string contents."""
    start = script.find(opener)
    while start != -1:
        depth = 0
        pos = start
        quote = ""
        end = -1
        while pos < len(script):
            ch = script[pos]
            if quote:
                if ch == "\\":
                    pos += 2
                    continue
                if ch == quote:
                    quote = ""
            elif ch in ("\"", "'"):
                quote = ch
            elif ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    end = pos
                    break
            pos += 1
        if end == -1:
            return
        yield script[start:end + 1]
        start = script.find(opener, end + 1)


def parse_shape_catalogue(script: str) -> Dict[str, ShapeDefinition]:
    """Named shapes in the script; guide (ghost) strokes are dropped."""
    shapes: Dict[str, ShapeDefinition] = {}
    for m in _SHAPE_RE.finditer(script):
        color_match = _COLOR_RE.search(m.group(0))
        color = color_match.group(1) if color_match else DEFAULT_COLOR
        if color.lower() == GUIDE_COLOR:
            continue
        name = m.group(1)
        shapes[name] = ShapeDefinition(
            name=name,
            path_data=m.group(2),
            anchor=Anchor(x=float(m.group(3)), y=float(m.group(4))),
            color=color,
        )
    return shapes


def parse_text_timeline(script: str) -> Tuple[StrokeLabel, ...]:
    """Stroke-number labels and the frame each becomes visible.

    The first label is visible at frame 0. Frames count from the moment the
    label layer is revealed (``_off:false``); waits before that are ignored.
    """
    block = next((b for b in iter_call_blocks(script) if _TEXT_TARGET_RE.search(b)), None)
    if block is None:
        return ()
    ctor = _TEXT_CTOR_RE.search(script)
    labels: List[StrokeLabel] = [StrokeLabel(stroke=int(ctor.group(1)) if ctor else 1, frame=0)]
    revealed = _REVEAL_RE.search(block) is None
    frame = 0
    for m in _TEXT_TOKEN_RE.finditer(block):
        if m.group(1) is not None:
            if revealed:
                frame += int(m.group(1))
            continue
        props = m.group(2) or ""
        if _REVEAL_RE.search(props):
            revealed = True
        value = _TEXT_VALUE_RE.search(props)
        if value:
            revealed = True
            labels.append(StrokeLabel(stroke=int(value.group(1)), frame=frame))
    return tuple(labels)


def parse_shape_timeline(script: str) -> Tuple[TimelineGroup, ...]:
    """One group per tween block that shows shapes, entries in document order."""
    groups: List[TimelineGroup] = []
    for block in iter_call_blocks(script):
        if _TEXT_TARGET_RE.search(block):
            continue
        entries = tuple(
            TimelineEntry(shape_ref=m.group(1), relative_wait=int(m.group(2)))
            for m in _STATE_RE.finditer(block)
        )
        if entries:
            groups.append(TimelineGroup(entries=entries))
    return tuple(groups)


def decode_timeline(script: str) -> AnimationTimeline:
    return AnimationTimeline(
        shapes=parse_shape_catalogue(script),
        labels=parse_text_timeline(script),
        groups=parse_shape_timeline(script),
    )


#########################################
# Stroke numbering
#########################################

def sort_groups(groups: Sequence[TimelineGroup]) -> List[TimelineGroup]:
    """Drawing order: by first absolute frame, ties keep document order."""
    return sorted(groups, key=lambda g: g.first_frame)


def infer_stroke_numbers(ordered: Sequence[TimelineGroup], labels: Sequence[StrokeLabel]) -> List[int]:
    """Stroke number for each group of ``ordered`` (already in drawing order)."""
    count = len(ordered)
    drawing_order = list(range(1, count + 1))
    if not labels or len(labels) != count:
        return drawing_order

    sorted_labels = sorted(labels, key=lambda l: l.frame)
    last_frame = sorted_labels[-1].frame
    numbers: List[int] = []
    for idx, group in enumerate(ordered):
        first = group.first_frame
        closest = min(sorted_labels, key=lambda l: abs(first - l.frame))
        if first > last_frame + TRAILING_MARGIN:
            numbers.append(1)
        elif abs(first - closest.frame) < MATCH_TOLERANCE:
            numbers.append(closest.stroke)
        else:
            numbers.append(count - idx)

    # Two blocks mapped to one stroke would merge their segments.
    if len(set(numbers)) != count:
        return drawing_order
    return numbers


def assemble_stroke_vectors(
    ordered: Sequence[TimelineGroup],
    numbers: Sequence[int],
    shapes: Dict[str, ShapeDefinition],
) -> List[StrokeVector]:
    """Segments 1..N per stroke from the shapes each block shows, sorted by (stroke, segment)."""
    vectors: List[StrokeVector] = []
    for group, stroke_number in zip(ordered, numbers):
        segment = 0
        for entry, frame in zip(group.entries, group.absolute_frames()):
            shape = shapes.get(entry.shape_ref)
            if shape is None:
                continue
            segment += 1
            vectors.append(StrokeVector(
                stroke_number=stroke_number,
                segment=segment,
                frame=frame,
                path_data=shape.path_data,
                anchor=shape.anchor,
                color=shape.color,
            ))
    vectors.sort(key=lambda v: (v.stroke_number, v.segment))
    return vectors


def build_stroke_vectors(timeline: AnimationTimeline) -> List[StrokeVector]:
    ordered = sort_groups(timeline.groups)
    numbers = infer_stroke_numbers(ordered, timeline.labels)
    return assemble_stroke_vectors(ordered, numbers, timeline.shapes)


def decode_stroke_vectors(script: Optional[str], debug: bool = False) -> List[StrokeVector]:
    """Stroke vectors for an animation script; empty when the script is missing or unparseable."""
    if not script:
        return []
    try:
        timeline = decode_timeline(script)
    except ValueError as e:
        log_debug(debug, f"animation script not decodable: {e}")
        return []
    log_debug(debug, f"animation shapes={len(timeline.shapes)} labels={len(timeline.labels)} blocks={len(timeline.groups)}")
    return build_stroke_vectors(timeline)
