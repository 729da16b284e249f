"""Tests for tree edit operations."""

from __future__ import annotations

import pytest

from settingtree import parse_macro
from settingtree.edits import (
    delete_node,
    group_nodes,
    indent_node,
    insert_page,
    insert_separator,
    move_node,
    outdent_node,
    rename_node,
)
from settingtree.schemas import MacroTree, Node, NodeKind


def _by_key(tree: MacroTree, key: str) -> Node:
    return next(node for node in tree.walk() if node.key == key)


def _page(tree: MacroTree, name: str) -> Node:
    return next(node for node in tree.walk() if node.kind == NodeKind.PAGE and node.name == name)


def _outline(tree: MacroTree, node=None) -> list:
    outline = []
    for child in tree.children(node or tree.root):
        if child.kind == NodeKind.GROUP:
            outline.append({child.name: _outline(tree, child)})
        elif child.kind == NodeKind.PAGE:
            outline.append(f"page:{child.name}")
        elif child.kind == NodeKind.SEPARATOR:
            outline.append(f"sep:{child.key}")
        else:
            outline.append(child.key)
    return outline


@pytest.fixture
def tree(grouped_macro: str) -> MacroTree:
    return parse_macro(grouped_macro).tree


class TestRenameNode:
    """Tests for rename_node function."""

    def test_group_and_page_names(self, tree: MacroTree) -> None:
        rename_node(tree, _by_key(tree, "Input2"), "  Placement ")
        rename_node(tree, _page(tree, "Extra"), "Mixing")

        assert _by_key(tree, "Input2").name == "Placement"
        assert _outline(tree)[5] == "page:Mixing"

    def test_control_name_marks_node_renamed(self, tree: MacroTree) -> None:
        node = _by_key(tree, "Input3")
        rename_node(tree, node, "Centre")

        assert node.properties["Name"] == "Centre"
        assert node.renamed

    def test_hidden_control_cannot_be_renamed(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="cannot be renamed"):
            rename_node(tree, _by_key(tree, "MainInput1"), "Background")

    def test_empty_name_rejected(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            rename_node(tree, _by_key(tree, "Input1"), "   ")


class TestGroupNodes:
    """Tests for group_nodes function."""

    def test_group_takes_place_of_first_node(self, tree: MacroTree) -> None:
        group = group_nodes(tree, [_by_key(tree, "Input6"), _by_key(tree, "Input2")], "Everything")

        assert group.internal_key is None
        assert _outline(tree) == [
            "MainInput1",
            "Input1",
            "page:Layout",
            {"Everything": [{"Transform": ["Input3", {"Rotation": ["Input5"]}]}, "sep:Input6"]},
            "page:Extra",
            "Input7",
        ]

    def test_nodes_must_share_parent(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="share one parent"):
            group_nodes(tree, [_by_key(tree, "Input1"), _by_key(tree, "Input3")], "Mixed")

    def test_pages_cannot_be_grouped(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="can be grouped"):
            group_nodes(tree, [_page(tree, "Layout")], "Pages")

    def test_nothing_to_group(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="Nothing to group"):
            group_nodes(tree, [], "Empty")


class TestDeleteNode:
    """Tests for delete_node function."""

    def test_children_are_promoted_in_place(self, tree: MacroTree) -> None:
        transform = _by_key(tree, "Input2")
        delete_node(tree, transform)

        assert transform.id not in tree.nodes
        assert _outline(tree) == [
            "MainInput1",
            "Input1",
            "page:Layout",
            "Input3",
            {"Rotation": ["Input5"]},
            "sep:Input6",
            "page:Extra",
            "Input7",
        ]
        assert tree.parent(_by_key(tree, "Input3")) is tree.root

    def test_root_cannot_be_deleted(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError):
            delete_node(tree, tree.root)


class TestMoveNode:
    """Tests for move_node function."""

    def test_swaps_with_neighbour(self, tree: MacroTree) -> None:
        move_node(tree, _by_key(tree, "Input1"), -1)
        assert _outline(tree)[:2] == ["Input1", "MainInput1"]

    def test_edges_and_step_size(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="edge"):
            move_node(tree, _by_key(tree, "MainInput1"), -1)
        with pytest.raises(ValueError, match="one position"):
            move_node(tree, _by_key(tree, "Input1"), 2)


class TestIndentOutdent:
    """Tests for indent_node and outdent_node functions."""

    def test_indent_into_group_above(self, tree: MacroTree) -> None:
        indent_node(tree, _by_key(tree, "Input6"))

        transform = _by_key(tree, "Input2")
        assert _outline(tree, transform) == ["Input3", {"Rotation": ["Input5"]}, "sep:Input6"]

    def test_indent_requires_group_above(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="not a group"):
            indent_node(tree, _by_key(tree, "Input1"))
        with pytest.raises(ValueError, match="No sibling above"):
            indent_node(tree, _by_key(tree, "MainInput1"))

    def test_outdent_places_node_after_group(self, tree: MacroTree) -> None:
        outdent_node(tree, _by_key(tree, "Input5"))

        transform = _by_key(tree, "Input2")
        assert _outline(tree, transform) == ["Input3", {"Rotation": []}, "Input5"]

    def test_outdent_requires_group_parent(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError, match="not inside a group"):
            outdent_node(tree, _by_key(tree, "Input1"))


class TestInsertions:
    """Tests for insert_page and insert_separator functions."""

    def test_page_goes_before_top_level_ancestor(self, tree: MacroTree) -> None:
        page = insert_page(tree, _by_key(tree, "Input5"), "Angles")

        assert tree.parent(page) is tree.root
        assert _outline(tree)[2:4] == ["page:Layout", "page:Angles"]

    def test_separator_follows_node_in_same_parent(self, tree: MacroTree) -> None:
        separator = insert_separator(tree, _by_key(tree, "Input3"))

        assert separator.key is None
        transform = _by_key(tree, "Input2")
        assert [child.kind for child in tree.children(transform)] == [
            NodeKind.CONTROL,
            NodeKind.SEPARATOR,
            NodeKind.GROUP,
        ]

    def test_separator_cannot_follow_page(self, tree: MacroTree) -> None:
        with pytest.raises(ValueError):
            insert_separator(tree, _page(tree, "Layout"))
