"""Rebuild the control tree from flat items and group descriptors."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from settingtree.schemas import (
    ControlDeclaration,
    FlatItem,
    MacroTree,
    MetadataEntry,
    Node,
    NodeKind,
    PageMarker,
    SeparatorItem,
)

logger = logging.getLogger(__name__)


def build_tree(items: Sequence[FlatItem], metadata: Mapping[str, MetadataEntry]) -> MacroTree:
    """Reconstruct the control tree.

    A control whose ``Source`` names a descriptor is a group proxy: the next
    ``subtree_size`` declarations, flattened depth-first, are its descendants.
    Page markers become children of the root wherever they appear and are not
    counted against any group's size.

    Precondition: every descriptor's size is a total descendant count and each
    group's descendants directly follow its proxy. Mismatched counts are not
    detected; they pull trailing siblings into a group or end it early.
    """
    tree = MacroTree.empty()
    position, _ = _consume(tree, tree.root, items, 0, None, metadata)
    if position < len(items):
        logger.debug("Tree builder stopped with %d unconsumed items", len(items) - position)
    return tree


def _consume(
    tree: MacroTree,
    parent: Node,
    items: Sequence[FlatItem],
    position: int,
    budget: int | None,
    metadata: Mapping[str, MetadataEntry],
) -> tuple[int, int]:
    """Attach items under ``parent`` until ``budget`` declarations are used.

    Returns the next queue position and the number of declarations consumed,
    nested ones included. ``budget=None`` consumes to the end of the queue.
    """
    taken = 0
    while position < len(items) and (budget is None or taken < budget):
        item = items[position]
        position += 1

        if isinstance(item, PageMarker):
            tree.add_node(NodeKind.PAGE, tree.root, name=item.name)
            continue

        taken += 1
        if isinstance(item, SeparatorItem):
            tree.add_node(
                NodeKind.SEPARATOR,
                parent,
                key=item.key,
                properties=dict(item.properties),
                original_text=item.original_text,
            )
            continue

        assert isinstance(item, ControlDeclaration)
        source = item.properties.get("Source")
        entry = metadata.get(source) if source else None
        if entry is None:
            tree.add_node(
                NodeKind.CONTROL,
                parent,
                key=item.key,
                properties=dict(item.properties),
                original_text=item.original_text,
                hidden=item.hidden,
            )
            continue

        group = tree.add_node(
            NodeKind.GROUP,
            parent,
            name=entry.name,
            key=item.key,
            internal_key=source,
            properties=dict(item.properties),
            original_text=item.original_text,
        )
        position, nested = _consume(tree, group, items, position, entry.subtree_size, metadata)
        if nested < entry.subtree_size:
            logger.debug(
                "Group %s declares %d descendants but only %d remain",
                source,
                entry.subtree_size,
                nested,
            )
        taken += nested
    return position, taken
