"""Parsing pipeline for macro .setting files."""

from __future__ import annotations

import logging

from settingtree.builder import build_tree
from settingtree.config import (
    DEFAULT_FILENAME,
    SETTINGTREE_DEFAULT_PAGE,
    SETTINGTREE_HELPER_NODE_NAME,
    SETTINGTREE_SEPARATOR_SOURCE,
    SETTINGTREE_SNIPPET_LENGTH,
)
from settingtree.flattener import flatten_inputs
from settingtree.metadata import read_helper_metadata
from settingtree.schemas import PageMarker, ParseDiagnostics, ParsedMacro
from settingtree.segmenter import segment_macro

logger = logging.getLogger(__name__)


def parse_macro(
    content: str,
    *,
    filename: str | None = None,
    helper_name: str = SETTINGTREE_HELPER_NODE_NAME,
    separator_source: str = SETTINGTREE_SEPARATOR_SOURCE,
    default_page: str = SETTINGTREE_DEFAULT_PAGE,
) -> ParsedMacro:
    """Segment, flatten and rebuild the control tree of a macro file.

    Args:
        content: Complete text of the .setting file.
        filename: Name the text came from, used to derive the output name.
        helper_name: Tool holding the group descriptors.
        separator_source: ``Source`` value marking separator inputs.
        default_page: Page of controls declared without a ``Page`` property.

    Returns:
        The tree, the segments needed to regenerate the file, the highest
        ``AutoLabel<N>`` index in use and a diagnostics record.

    Raises:
        StructureNotFoundError: If the file has no macro operator.
    """
    segmented = segment_macro(content, helper_name=helper_name)

    items = flatten_inputs(segmented.inputs.text, default_page=default_page, separator_source=separator_source)
    segmented.inputs.items = items
    metadata = read_helper_metadata(segmented.helper.text)
    segmented.helper.metadata = metadata.entries

    tree = build_tree(items, metadata.entries)
    max_auto_label = max(metadata.max_auto_label, tree.max_auto_label())

    diagnostics = ParseDiagnostics(
        has_inputs=not segmented.inputs.synthesized,
        has_tools=segmented.has_tools,
        has_helper=not segmented.helper.synthesized,
        has_outputs=segmented.has_outputs,
        has_view_info=segmented.has_view_info,
        declaration_count=sum(1 for item in items if not isinstance(item, PageMarker)),
        page_count=sum(1 for item in items if isinstance(item, PageMarker)),
        descriptor_count=len(metadata.entries),
        inputs_snippet=segmented.inputs.text[:SETTINGTREE_SNIPPET_LENGTH],
        helper_snippet=segmented.helper.text[:SETTINGTREE_SNIPPET_LENGTH],
    )
    logger.debug(
        "Parsed %s %r: %d declarations, %d pages, %d group descriptors",
        segmented.operator.kind,
        segmented.operator.name,
        diagnostics.declaration_count,
        diagnostics.page_count,
        diagnostics.descriptor_count,
    )

    return ParsedMacro(
        content=content,
        filename=filename or DEFAULT_FILENAME,
        operator=segmented.operator,
        segments=segmented.segments,
        tree=tree,
        max_auto_label=max_auto_label,
        diagnostics=diagnostics,
    )
