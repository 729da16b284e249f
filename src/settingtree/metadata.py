"""Read group descriptors from the helper node."""

from __future__ import annotations

import logging
import re

from settingtree.braces import find_top_level_block, iter_top_level_blocks
from settingtree.properties import extract_properties
from settingtree.schemas import HelperMetadata, MetadataEntry

logger = logging.getLogger(__name__)

_USER_CONTROLS_RE = re.compile(r"UserControls\s*=\s*ordered\(\s*\)\s*\{")
_DESCRIPTOR_RE = re.compile(r"([A-Za-z_]\w*)\s*=\s*\{")
_AUTO_LABEL_RE = re.compile(r"^AutoLabel(\d+)$")


def auto_label_index(label: str) -> int | None:
    """Return N for an ``AutoLabel<N>`` label, else None."""
    match = _AUTO_LABEL_RE.match(label)
    return int(match.group(1)) if match else None


def read_helper_metadata(helper_text: str) -> HelperMetadata:
    """Parse the helper's ``UserControls`` list into group descriptors.

    Descriptors missing a name, nest level or input count are skipped. The
    highest ``AutoLabel<N>`` index is tracked over every label present,
    including skipped ones, so new labels never reuse an index.
    """
    metadata = HelperMetadata()
    if not helper_text:
        return metadata

    helper_block = find_top_level_block(helper_text, re.compile(r"\w+\s*=\s*\w+\s*\{"))
    if helper_block is None:
        logger.debug("Helper text has no balanced block")
        return metadata
    user_controls = find_top_level_block(
        helper_text, _USER_CONTROLS_RE, helper_block.content_start, helper_block.close_brace
    )
    if user_controls is None:
        return metadata

    for match, span in iter_top_level_blocks(
        helper_text, _DESCRIPTOR_RE, user_controls.content_start, user_controls.close_brace
    ):
        label = match.group(1)
        index = auto_label_index(label)
        if index is None:
            continue
        metadata.max_auto_label = max(metadata.max_auto_label, index)

        properties = extract_properties(span.content(helper_text))
        entry = _descriptor_entry(properties)
        if entry is None:
            logger.debug("Skipping incomplete descriptor %s: %r", label, properties)
            continue
        metadata.entries[label] = entry
    return metadata


def _descriptor_entry(properties: dict[str, str]) -> MetadataEntry | None:
    name = properties.get("LINKS_Name")
    nest_level = properties.get("LBLC_NestLevel", "")
    num_inputs = properties.get("LBLC_NumInputs", "")
    if name is None or not nest_level.isdigit() or not num_inputs.isdigit():
        return None
    return MetadataEntry(name=name, nest_level=int(nest_level), subtree_size=int(num_inputs))
