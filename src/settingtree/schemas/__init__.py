"""Shared schemas for settingtree."""

from settingtree.schemas.flat_items import ControlDeclaration, FlatItem, PageMarker, SeparatorItem
from settingtree.schemas.metadata import HelperMetadata, MetadataEntry
from settingtree.schemas.results import GeneratedMacro, OperatorInfo, ParseDiagnostics, ParsedMacro
from settingtree.schemas.segments import Segment, SegmentKind
from settingtree.schemas.tree import MacroTree, Node, NodeKind

__all__ = [
    "ControlDeclaration",
    "FlatItem",
    "GeneratedMacro",
    "HelperMetadata",
    "MacroTree",
    "MetadataEntry",
    "Node",
    "NodeKind",
    "OperatorInfo",
    "PageMarker",
    "ParseDiagnostics",
    "ParsedMacro",
    "Segment",
    "SegmentKind",
    "SeparatorItem",
]
