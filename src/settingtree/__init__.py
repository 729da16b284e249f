"""settingtree: edit the exposed-control tree of macro .setting files."""

from settingtree.exceptions import (
    GenerationError,
    RenameFormatError,
    SettingTreeError,
    StructureNotFoundError,
)
from settingtree.macro import parse_macro
from settingtree.regenerator import output_filename, regenerate
from settingtree.schemas import GeneratedMacro, MacroTree, Node, NodeKind, ParsedMacro

__all__ = [
    "GeneratedMacro",
    "GenerationError",
    "MacroTree",
    "Node",
    "NodeKind",
    "ParsedMacro",
    "RenameFormatError",
    "SettingTreeError",
    "StructureNotFoundError",
    "output_filename",
    "parse_macro",
    "regenerate",
]
