"""Tests for stroke-order animation decoding."""

from lexlist.extract.animation import (
    GUIDE_COLOR,
    build_stroke_vectors,
    decode_stroke_vectors,
    decode_timeline,
    infer_stroke_numbers,
    iter_call_blocks,
    parse_shape_catalogue,
    parse_shape_timeline,
    parse_text_timeline,
    sort_groups,
)
from lexlist.schema.record import StrokeLabel, TimelineEntry, TimelineGroup


def _group(*waits):
    return TimelineGroup(entries=tuple(
        TimelineEntry(shape_ref=f"shape_{i + 1}", relative_wait=w) for i, w in enumerate(waits)
    ))


def _labels(*frames):
    return [StrokeLabel(stroke=i + 1, frame=f) for i, f in enumerate(frames)]


class TestTimelineGroup:
    """Tests for absolute frame reconstruction."""

    def test_prefix_sums(self):
        """Absolute frame i is the sum of the first i relative waits."""
        group = _group(5, 3, 0, 12)
        assert group.absolute_frames() == [5, 8, 8, 20]

    def test_first_frame(self):
        """first_frame is the first entry's wait."""
        assert _group(24, 2).first_frame == 24

    def test_empty_group(self):
        """An empty group starts at frame 0."""
        assert TimelineGroup(entries=()).first_frame == 0


class TestIterCallBlocks:
    """Tests for balanced call-block scanning."""

    def test_balanced_blocks(self):
        """Nested parentheses stay inside one block."""
        script = 'a.timeline.addTween(f(g(1)).to(2)); b.timeline.addTween(h());'
        blocks = list(iter_call_blocks(script))
        assert blocks == ["timeline.addTween(f(g(1)).to(2))", "timeline.addTween(h())"]

    def test_parentheses_in_strings_ignored(self):
        """Parentheses inside string literals do not close the block."""
        script = 'this.timeline.addTween(x.to({text:")"},0));'
        assert list(iter_call_blocks(script)) == ['timeline.addTween(x.to({text:")"},0))']

    def test_unterminated_block(self):
        """An unterminated block yields nothing."""
        assert list(iter_call_blocks("this.timeline.addTween(x.to(")) == []


class TestShapeCatalogue:
    """Tests for shape catalogue parsing."""

    def test_guide_shapes_dropped(self, animation_script):
        """Shapes in the guide colour are not part of the catalogue."""
        shapes = parse_shape_catalogue(animation_script)
        assert "shape" not in shapes
        assert all(s.color.lower() != GUIDE_COLOR for s in shapes.values())

    def test_path_anchor_and_color(self, animation_script):
        """Each shape carries its path, translation and fill colour."""
        shape = parse_shape_catalogue(animation_script)["shape_4"]
        assert shape.path_data == "M40 40L50 50"
        assert shape.anchor.x == -3.5
        assert shape.anchor.y == 23
        assert shape.color == "#000000"

    def test_missing_fill_uses_default_color(self):
        """A shape without a fill call gets the default colour."""
        script = (
            'this.shape_1 = new cjs.Shape();\n'
            'this.shape_1.graphics.s("#F00").p("M0 0");\n'
            'this.shape_1.setTransform(1,2);\n'
        )
        assert parse_shape_catalogue(script)["shape_1"].color == "#000000"


class TestTextTimeline:
    """Tests for stroke-number label parsing."""

    def test_labels_and_frames(self, animation_script):
        """Labels follow the cumulative waits, the first at frame 0."""
        labels = parse_text_timeline(animation_script)
        assert [(l.stroke, l.frame) for l in labels] == [(1, 0), (2, 24), (3, 48)]

    def test_frames_count_from_reveal(self):
        """Waits before the label layer is revealed do not count."""
        script = (
            'this.text = new cjs.Text("1", "20px", "#F00");\n'
            'this.timeline.addTween(cjs.Tween.get(this.text).wait(10).to({_off:false},0)'
            '.wait(24).to({text:"2"},0));'
        )
        labels = parse_text_timeline(script)
        assert [(l.stroke, l.frame) for l in labels] == [(1, 0), (2, 24)]

    def test_no_text_block(self):
        """A script without a text tween has no labels."""
        assert parse_text_timeline('this.timeline.addTween(cjs.Tween.get({}).wait(3));') == ()


class TestShapeTimeline:
    """Tests for tween block parsing."""

    def test_one_group_per_block(self, animation_script):
        """Each shape tween block becomes one group in document order."""
        groups = parse_shape_timeline(animation_script)
        assert [g.first_frame for g in groups] == [24, 48, 72]
        assert [e.shape_ref for e in groups[0].entries] == ["shape_1", "shape_2"]
        assert groups[0].absolute_frames() == [24, 26]

    def test_text_block_skipped(self, animation_script):
        """The label tween is not a stroke block."""
        groups = parse_shape_timeline(animation_script)
        assert len(groups) == 3

    def test_sort_groups_by_first_frame(self):
        """Groups are ordered by first frame, ties keep document order."""
        a, b, c = _group(30), _group(10), _group(30, 1)
        assert sort_groups([a, b, c]) == [b, a, c]


class TestInferStrokeNumbers:
    """Tests for the stroke number heuristic."""

    def test_closest_label_then_trailing_block(self):
        """Labels at 0/24/48 and blocks at 24/48/72 give strokes 2, 3, 1."""
        ordered = [_group(24), _group(48), _group(72)]
        assert infer_stroke_numbers(ordered, _labels(0, 24, 48)) == [2, 3, 1]

    def test_count_mismatch_uses_drawing_order(self):
        """Different label and block counts fall back to drawing order."""
        ordered = [_group(24), _group(48)]
        assert infer_stroke_numbers(ordered, _labels(0, 24, 48)) == [1, 2]

    def test_no_labels_uses_drawing_order(self):
        """Without labels strokes follow drawing order."""
        assert infer_stroke_numbers([_group(1), _group(5), _group(9)], []) == [1, 2, 3]

    def test_far_from_every_label_uses_reverse_order(self):
        """A block more than the tolerance from every label gets its reverse drawing position."""
        ordered = [_group(50), _group(100), _group(150)]
        assert infer_stroke_numbers(ordered, _labels(0, 100, 200)) == [3, 2, 1]

    def test_duplicate_assignment_falls_back(self):
        """Two blocks matched to one label fall back to drawing order."""
        ordered = [_group(20), _group(24), _group(200)]
        labels = _labels(0, 22, 100)
        assert infer_stroke_numbers(ordered, labels) == [1, 2, 3]


class TestBuildStrokeVectors:
    """Tests for stroke vector assembly."""

    def test_end_to_end(self, animation_script):
        """The sample script yields four segments over three strokes."""
        vectors = decode_stroke_vectors(animation_script)
        summary = [(v.stroke_number, v.segment, v.frame, v.path_data) for v in vectors]
        assert summary == [
            (1, 1, 72, "M40 40L50 50"),
            (2, 1, 24, "M10 10L20 20"),
            (2, 2, 26, "M20 20L30 30"),
            (3, 1, 48, "M30 30L40 40"),
        ]

    def test_pairs_unique_and_segments_contiguous(self, animation_script):
        """(strokeNumber, segment) pairs are unique and segments run 1..n per stroke."""
        vectors = decode_stroke_vectors(animation_script)
        pairs = [(v.stroke_number, v.segment) for v in vectors]
        assert len(pairs) == len(set(pairs))
        by_stroke = {}
        for stroke, segment in pairs:
            by_stroke.setdefault(stroke, []).append(segment)
        for segments in by_stroke.values():
            assert sorted(segments) == list(range(1, len(segments) + 1))

    def test_unresolved_shapes_keep_segments_contiguous(self):
        """A block entry naming an unknown shape does not leave a gap."""
        script = (
            'this.shape_1 = new cjs.Shape();\n'
            'this.shape_1.graphics.f("#F00").s().p("M1 1");\n'
            'this.shape_1.setTransform(0,0);\n'
            'this.shape_3 = new cjs.Shape();\n'
            'this.shape_3.graphics.f("#F00").s().p("M3 3");\n'
            'this.shape_3.setTransform(0,0);\n'
            'this.timeline.addTween(cjs.Tween.get({}).to({state:[{t:this.shape_1}]},1)'
            '.to({state:[{t:this.shape_2}]},1).to({state:[{t:this.shape_3}]},1));'
        )
        vectors = build_stroke_vectors(decode_timeline(script))
        assert [(v.segment, v.frame) for v in vectors] == [(1, 1), (2, 3)]

    def test_to_dict_keys(self, animation_script):
        """Serialized vectors carry the record field names."""
        data = decode_stroke_vectors(animation_script)[0].to_dict()
        assert data == {
            "strokeNumber": 1,
            "segment": 1,
            "frame": 72,
            "pathData": "M40 40L50 50",
            "anchor": {"x": -3.5, "y": 23.0},
            "color": "#000000",
        }

    def test_empty_or_garbage_script(self):
        """Missing or unrecognisable scripts give no vectors."""
        assert decode_stroke_vectors(None) == []
        assert decode_stroke_vectors("") == []
        assert decode_stroke_vectors("<html>not a script</html>") == []
