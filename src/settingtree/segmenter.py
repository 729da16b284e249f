"""Split a setting file into verbatim text and the two regenerated regions."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from settingtree.braces import BlockSpan, find_matching_brace, find_top_level_block
from settingtree.config import SETTINGTREE_HELPER_NODE_NAME
from settingtree.exceptions import StructureNotFoundError
from settingtree.properties import unescape_string
from settingtree.schemas import OperatorInfo, Segment, SegmentKind

logger = logging.getLogger(__name__)

_OPERATOR_RE = re.compile(
    r'(?:\[\s*"((?:[^"\\]|\\.)*)"\s*\]|"((?:[^"\\]|\\.)*)"|([A-Za-z_]\w*))'
    r"\s*=\s*(GroupOperator|MacroOperator)\s*\{"
)
_INPUTS_RE = re.compile(r"Inputs\s*=\s*ordered\(\s*\)\s*\{")
_TOOLS_RE = re.compile(r"Tools\s*=\s*ordered\(\s*\)\s*\{")
_OUTPUTS_RE = re.compile(r"Outputs\s*=\s*\{")
_VIEW_INFO_RE = re.compile(r"ViewInfo\s*=\s*\w*Info\s*\{")


@dataclass
class SegmentedMacro:
    """Segments of one file plus the landmarks found while cutting them."""

    operator: OperatorInfo
    segments: list[Segment]
    inputs: Segment
    helper: Segment
    has_tools: bool
    has_outputs: bool
    has_view_info: bool


def helper_header_pattern(helper_name: str = SETTINGTREE_HELPER_NODE_NAME) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(helper_name)}\s*=\s*Background\s*\{{")


def segment_macro(content: str, *, helper_name: str = SETTINGTREE_HELPER_NODE_NAME) -> SegmentedMacro:
    """Cut ``content`` into segments that tile it without gaps.

    The inputs region is the body of the operator's ``Inputs = ordered()``
    block; the helper region is the whole helper tool inside the operator's
    ``Tools`` list. Either becomes a zero-length insertion point when absent.

    Raises:
        StructureNotFoundError: If no ``GroupOperator``/``MacroOperator`` header
            is present or its block is never closed.
    """
    operator, block = _locate_operator(content)
    body_start, body_end = block.content_start, block.close_brace

    inputs_block = find_top_level_block(content, _INPUTS_RE, body_start, body_end)
    if inputs_block is not None:
        inputs = Segment(
            kind=SegmentKind.INPUTS,
            start=inputs_block.content_start,
            end=inputs_block.close_brace,
            text=inputs_block.content(content),
        )
    else:
        logger.debug("Operator %s has no Inputs block; using an insertion point", operator.name)
        point = _after_first_line(content, block)
        inputs = Segment(kind=SegmentKind.INPUTS, start=point, end=point, text="", synthesized=True)

    tools_block = find_top_level_block(content, _TOOLS_RE, body_start, body_end)
    helper = _locate_helper(content, tools_block, block, helper_name)

    specials = sorted([inputs, helper], key=lambda segment: (segment.start, segment.kind != SegmentKind.INPUTS))
    if specials[0].end > specials[1].start:
        raise StructureNotFoundError("Inputs block and helper tool overlap; the macro layout is not recognised")

    return SegmentedMacro(
        operator=operator,
        segments=_tile(content, specials),
        inputs=inputs,
        helper=helper,
        has_tools=tools_block is not None,
        has_outputs=find_top_level_block(content, _OUTPUTS_RE, body_start, body_end) is not None,
        has_view_info=find_top_level_block(content, _VIEW_INFO_RE, body_start, body_end) is not None,
    )


def _locate_operator(content: str) -> tuple[OperatorInfo, BlockSpan]:
    match = _OPERATOR_RE.search(content)
    if not match:
        raise StructureNotFoundError(
            "No GroupOperator or MacroOperator found. Check that this is a macro .setting file."
        )
    quoted = match.group(1) if match.group(1) is not None else match.group(2)
    name = unescape_string(quoted) if quoted is not None else match.group(3)
    open_brace = match.end() - 1
    close_brace = find_matching_brace(content, open_brace)
    if close_brace is None:
        raise StructureNotFoundError(f"Operator {name!r} is missing its closing brace")
    operator = OperatorInfo(name=name, kind=match.group(4), header_start=match.start())
    return operator, BlockSpan(match.start(), open_brace, close_brace)


def _locate_helper(
    content: str,
    tools_block: BlockSpan | None,
    operator_block: BlockSpan,
    helper_name: str,
) -> Segment:
    if tools_block is None:
        logger.debug("Operator has no Tools list; helper cannot be placed")
        point = operator_block.close_brace
        return Segment(kind=SegmentKind.HELPER, start=point, end=point, text="", synthesized=True)

    helper_block = find_top_level_block(
        content, helper_header_pattern(helper_name), tools_block.content_start, tools_block.close_brace
    )
    if helper_block is None:
        point = _after_first_line(content, tools_block)
        return Segment(kind=SegmentKind.HELPER, start=point, end=point, text="", synthesized=True)
    return Segment(
        kind=SegmentKind.HELPER,
        start=helper_block.start,
        end=helper_block.end,
        text=content[helper_block.start : helper_block.end],
    )


def _after_first_line(content: str, block: BlockSpan) -> int:
    newline = content.find("\n", block.content_start, block.close_brace)
    if newline == -1:
        return block.content_start
    return newline + 1


def _tile(content: str, specials: list[Segment]) -> list[Segment]:
    segments: list[Segment] = []
    cursor = 0
    for special in specials:
        if special.start > cursor:
            segments.append(
                Segment(kind=SegmentKind.VERBATIM, start=cursor, end=special.start, text=content[cursor : special.start])
            )
        segments.append(special)
        cursor = special.end
    if cursor < len(content):
        segments.append(Segment(kind=SegmentKind.VERBATIM, start=cursor, end=len(content), text=content[cursor:]))
    return segments
