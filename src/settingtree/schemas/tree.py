"""Editable control tree models."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, Field

_AUTO_LABEL_RE = re.compile(r"^AutoLabel(\d+)$")


class NodeKind(str, Enum):
    """Enumeration for tree node variants."""

    ROOT = "root"
    PAGE = "page"
    GROUP = "group"
    CONTROL = "control"
    SEPARATOR = "separator"


class Node(BaseModel):
    """A node of the control tree.

    Links are ids into the owning :class:`MacroTree` arena rather than object
    references.

    Attributes:
        id: Arena id, unique within one tree.
        kind: Node variant.
        parent_id: Id of the owning parent (None for the root).
        child_ids: Ordered ids of the direct children.
        name: Page or group name.
        key: Declaration key the node was read from, if any.
        internal_key: Group label (``AutoLabel<N>``); unset for new groups.
        properties: Declaration properties (controls, separators, group proxies).
        original_text: Declaration text captured at parse time.
        hidden: True for ``MainInput<N>`` controls.
        renamed: True once a control's ``Name`` property was edited.
    """

    id: int
    kind: NodeKind
    parent_id: int | None = None
    child_ids: list[int] = Field(default_factory=list)
    name: str | None = None
    key: str | None = None
    internal_key: str | None = None
    properties: dict[str, str] = Field(default_factory=dict)
    original_text: str | None = None
    hidden: bool = False
    renamed: bool = False


class MacroTree(BaseModel):
    """Arena holding every node of one parsed macro."""

    nodes: dict[int, Node]
    root_id: int = 0
    next_id: int = 1

    @classmethod
    def empty(cls) -> MacroTree:
        return cls(nodes={0: Node(id=0, kind=NodeKind.ROOT)})

    @property
    def root(self) -> Node:
        return self.nodes[self.root_id]

    def get(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def children(self, node: Node) -> list[Node]:
        return [self.nodes[child_id] for child_id in node.child_ids]

    def parent(self, node: Node) -> Node | None:
        if node.parent_id is None:
            return None
        return self.nodes[node.parent_id]

    def add_node(self, kind: NodeKind, parent: Node, index: int | None = None, **fields: Any) -> Node:
        """Create a node and attach it under ``parent``."""
        node = Node(id=self.next_id, kind=kind, **fields)
        self.next_id += 1
        self.nodes[node.id] = node
        self.attach(node, parent, index)
        return node

    def attach(self, node: Node, parent: Node, index: int | None = None) -> None:
        """Insert ``node`` into ``parent``'s children, detaching it first."""
        if node.parent_id is not None:
            self.detach(node)
        if index is None:
            parent.child_ids.append(node.id)
        else:
            parent.child_ids.insert(index, node.id)
        node.parent_id = parent.id

    def detach(self, node: Node) -> int:
        """Remove ``node`` from its parent and return its former index."""
        parent = self.parent(node)
        if parent is None:
            raise ValueError("The root node cannot be detached")
        index = parent.child_ids.index(node.id)
        del parent.child_ids[index]
        node.parent_id = None
        return index

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Yield the descendants of ``node`` (default root) in pre-order."""
        start = node or self.root
        for child in self.children(start):
            yield child
            yield from self.walk(child)

    def group_depth(self, node: Node) -> int:
        """Count the Group ancestors of ``node``."""
        depth = 0
        current = self.parent(node)
        while current is not None:
            if current.kind == NodeKind.GROUP:
                depth += 1
            current = self.parent(current)
        return depth

    def descendant_count(self, node: Node) -> int:
        total = 0
        for child in self.children(node):
            total += 1 + self.descendant_count(child)
        return total

    def top_level_ancestor(self, node: Node) -> Node:
        """Return the ancestor of ``node`` that is a direct child of the root."""
        current = node
        while current.parent_id is not None and current.parent_id != self.root_id:
            current = self.nodes[current.parent_id]
        return current

    def max_auto_label(self) -> int:
        """Highest ``AutoLabel<N>`` index held by any group in the tree."""
        highest = 0
        for node in self.walk():
            if node.kind == NodeKind.GROUP and node.internal_key:
                match = _AUTO_LABEL_RE.match(node.internal_key)
                if match:
                    highest = max(highest, int(match.group(1)))
        return highest

    def signature(self, node: Node | None = None) -> tuple:
        """Shape, names, control properties and hidden flags as nested tuples.

        Two trees with equal signatures are isomorphic for editing purposes.
        """
        start = node or self.root
        properties = tuple(sorted(start.properties.items())) if start.kind == NodeKind.CONTROL else ()
        name = start.name if start.kind in (NodeKind.PAGE, NodeKind.GROUP) else None
        return (
            start.kind.value,
            name,
            properties,
            start.hidden,
            tuple(self.signature(child) for child in self.children(start)),
        )
