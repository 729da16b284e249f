"""Tests for the segmenter."""

from __future__ import annotations

import pytest

from settingtree.exceptions import StructureNotFoundError
from settingtree.schemas import SegmentKind
from settingtree.segmenter import segment_macro


def _assert_tiles(content: str, segments) -> None:
    cursor = 0
    for segment in segments:
        assert segment.start == cursor
        assert segment.end >= segment.start
        assert content[segment.start : segment.end] == segment.text
        cursor = segment.end
    assert cursor == len(content)
    assert "".join(segment.text for segment in segments) == content


class TestSegmentMacro:
    """Tests for segment_macro function."""

    def test_segments_tile_the_file(self, grouped_macro: str) -> None:
        """Segments are ordered, gap-free and reproduce the file."""
        segmented = segment_macro(grouped_macro)

        _assert_tiles(grouped_macro, segmented.segments)
        kinds = [segment.kind for segment in segmented.segments]
        assert kinds == [
            SegmentKind.VERBATIM,
            SegmentKind.INPUTS,
            SegmentKind.VERBATIM,
            SegmentKind.HELPER,
            SegmentKind.VERBATIM,
        ]

    def test_operator_identity(self, grouped_macro: str) -> None:
        segmented = segment_macro(grouped_macro)

        assert segmented.operator.name == "LayoutTool"
        assert segmented.operator.kind == "MacroOperator"
        assert grouped_macro[segmented.operator.header_start :].startswith("LayoutTool = MacroOperator {")

    def test_inputs_region_is_block_body(self, grouped_macro: str) -> None:
        segmented = segment_macro(grouped_macro)

        assert segmented.inputs.text.lstrip().startswith("MainInput1 = InstanceInput {")
        assert grouped_macro[: segmented.inputs.start].endswith("Inputs = ordered() {")
        assert grouped_macro[segmented.inputs.end] == "}"

    def test_helper_region_covers_helper_tool(self, grouped_macro: str) -> None:
        segmented = segment_macro(grouped_macro)

        assert not segmented.helper.synthesized
        assert segmented.helper.text.startswith("background_helper = Background {")
        assert segmented.helper.text.endswith("}")
        assert grouped_macro[segmented.helper.end :].startswith(",\n\t\t\t\tMerge1 = Merge {")

    def test_landmarks(self, grouped_macro: str) -> None:
        segmented = segment_macro(grouped_macro)

        assert segmented.has_tools
        assert segmented.has_outputs
        assert segmented.has_view_info

    def test_missing_helper_gets_insertion_point(self, simple_macro: str) -> None:
        """Without a helper tool a zero-length point follows the Tools opening line."""
        segmented = segment_macro(simple_macro)

        helper = segmented.helper
        assert helper.synthesized
        assert helper.start == helper.end
        assert simple_macro[: helper.start].endswith("Tools = ordered() {\n")
        assert simple_macro[helper.start :].startswith("\t\t\t\tBlur1 = Blur {")
        _assert_tiles(simple_macro, segmented.segments)

    def test_missing_inputs_gets_insertion_point(self) -> None:
        content = (
            "{\n\tTools = ordered() {\n\t\tEmpty = GroupOperator {\n\t\t\tCtrlWZoom = false,\n"
            "\t\t\tOutputs = { },\n\t\t\tViewInfo = GroupInfo { Pos = { 0, 0 } },\n"
            "\t\t\tTools = ordered() {\n\t\t\t},\n\t\t}\n\t},\n}\n"
        )
        segmented = segment_macro(content)

        assert segmented.inputs.synthesized
        assert content[segmented.inputs.start :].startswith("\t\t\tCtrlWZoom")
        _assert_tiles(content, segmented.segments)

    def test_quoted_operator_name(self) -> None:
        content = '{ Tools = ordered() { ["My Macro"] = GroupOperator { Inputs = ordered() { }, }, }, }'
        segmented = segment_macro(content)

        assert segmented.operator.name == "My Macro"
        assert segmented.operator.kind == "GroupOperator"
        assert not segmented.has_tools

    def test_missing_operator_is_structural_error(self) -> None:
        with pytest.raises(StructureNotFoundError, match="No GroupOperator or MacroOperator"):
            segment_macro("{ Tools = ordered() { Blur1 = Blur { } } }")

    def test_unclosed_operator_is_structural_error(self) -> None:
        with pytest.raises(StructureNotFoundError, match="closing brace"):
            segment_macro("{ Tools = ordered() { M = GroupOperator { Inputs = ordered() {")

    def test_nested_inputs_are_not_mistaken_for_exposed_inputs(self, grouped_macro: str) -> None:
        """Tool-level ``Inputs = { ... }`` tables never become the inputs region."""
        segmented = segment_macro(grouped_macro)
        assert "Width = Input" not in segmented.inputs.text
