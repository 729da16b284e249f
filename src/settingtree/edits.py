"""Tree mutations used by editors of a parsed macro.

Every function keeps the tree invariants the regenerator relies on: pages
stay direct children of the root, each node has one parent, and child order
is preserved except where the operation moves a node.
"""

from __future__ import annotations

from typing import Iterable

from settingtree.schemas import MacroTree, Node, NodeKind

_MOVABLE = (NodeKind.CONTROL, NodeKind.GROUP, NodeKind.SEPARATOR)


def rename_node(tree: MacroTree, node: Node, name: str) -> None:
    """Rename a page or group, or set the ``Name`` of a visible control."""
    new_name = name.strip()
    if not new_name:
        raise ValueError("Name must not be empty")
    if node.kind in (NodeKind.PAGE, NodeKind.GROUP):
        node.name = new_name
        return
    if node.kind == NodeKind.CONTROL and not node.hidden:
        node.properties["Name"] = new_name
        node.renamed = True
        return
    raise ValueError(f"Node {node.id} of kind {node.kind.value!r} cannot be renamed")


def group_nodes(tree: MacroTree, nodes: Iterable[Node], name: str) -> Node:
    """Wrap sibling nodes in a new group placed where the first of them was.

    The group has no internal label; one is assigned on regeneration.
    """
    selected = list(nodes)
    if not selected:
        raise ValueError("Nothing to group")
    parent_ids = {node.parent_id for node in selected}
    if len(parent_ids) != 1 or None in parent_ids:
        raise ValueError("Grouped nodes must share one parent")
    if any(node.kind not in _MOVABLE for node in selected):
        raise ValueError("Only controls, groups and separators can be grouped")

    parent = tree.get(parent_ids.pop())
    selected.sort(key=lambda node: parent.child_ids.index(node.id))
    first_index = parent.child_ids.index(selected[0].id)
    group = tree.add_node(NodeKind.GROUP, parent, first_index, name=name.strip() or "Group")
    for node in selected:
        tree.attach(node, group)
    return group


def delete_node(tree: MacroTree, node: Node) -> None:
    """Remove ``node``; its children take its place under its former parent."""
    parent = tree.parent(node)
    if parent is None:
        raise ValueError("The root node cannot be deleted")
    index = tree.detach(node)
    for offset, child in enumerate(tree.children(node)):
        child.parent_id = None
        tree.attach(child, parent, index + offset)
    node.child_ids = []
    del tree.nodes[node.id]


def move_node(tree: MacroTree, node: Node, offset: int) -> None:
    """Swap ``node`` with the sibling ``offset`` (-1 or 1) positions away."""
    if offset not in (-1, 1):
        raise ValueError("Nodes move one position at a time")
    parent = tree.parent(node)
    if parent is None:
        raise ValueError("The root node cannot be moved")
    siblings = parent.child_ids
    index = siblings.index(node.id)
    target = index + offset
    if not 0 <= target < len(siblings):
        raise ValueError("Node is already at the edge of its parent")
    siblings[index], siblings[target] = siblings[target], siblings[index]


def indent_node(tree: MacroTree, node: Node) -> None:
    """Move ``node`` to the end of the group directly above it."""
    parent = tree.parent(node)
    if parent is None or node.kind not in _MOVABLE:
        raise ValueError(f"Node {node.id} cannot be indented")
    index = parent.child_ids.index(node.id)
    if index == 0:
        raise ValueError("No sibling above to indent into")
    above = tree.get(parent.child_ids[index - 1])
    if above.kind != NodeKind.GROUP:
        raise ValueError("The sibling above is not a group")
    tree.attach(node, above)


def outdent_node(tree: MacroTree, node: Node) -> None:
    """Move ``node`` out of its group to just after that group."""
    parent = tree.parent(node)
    if parent is None or parent.kind != NodeKind.GROUP:
        raise ValueError(f"Node {node.id} is not inside a group")
    grandparent = tree.parent(parent)
    assert grandparent is not None
    tree.attach(node, grandparent, grandparent.child_ids.index(parent.id) + 1)


def insert_page(tree: MacroTree, before: Node, name: str) -> Node:
    """Start a new page in front of the top-level ancestor of ``before``."""
    if before.kind == NodeKind.ROOT:
        raise ValueError("A page must be placed before a node")
    anchor = tree.top_level_ancestor(before)
    index = tree.root.child_ids.index(anchor.id)
    return tree.add_node(NodeKind.PAGE, tree.root, index, name=name.strip() or "Page")


def insert_separator(tree: MacroTree, after: Node) -> Node:
    """Add a separator right after ``after`` under the same parent."""
    parent = tree.parent(after)
    if parent is None or after.kind == NodeKind.PAGE:
        raise ValueError("A separator must follow a control, group or separator")
    return tree.add_node(NodeKind.SEPARATOR, parent, parent.child_ids.index(after.id) + 1)
