"""Parse and regeneration output models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from settingtree.schemas.segments import Segment
from settingtree.schemas.tree import MacroTree

OperatorKind = Literal["GroupOperator", "MacroOperator"]


class OperatorInfo(BaseModel):
    """Identity of the macro operator.

    Attributes:
        name: Operator name with any quoting removed.
        kind: ``GroupOperator`` or ``MacroOperator``.
        header_start: Offset of the operator header in the file.
    """

    name: str
    kind: OperatorKind
    header_start: int = 0


class ParseDiagnostics(BaseModel):
    """Troubleshooting details gathered while parsing."""

    has_inputs: bool = False
    has_tools: bool = False
    has_helper: bool = False
    has_outputs: bool = False
    has_view_info: bool = False
    declaration_count: int = 0
    page_count: int = 0
    descriptor_count: int = 0
    inputs_snippet: str = ""
    helper_snippet: str = ""


class ParsedMacro(BaseModel):
    """Everything needed to regenerate a macro after editing its tree."""

    content: str
    filename: str
    operator: OperatorInfo
    segments: list[Segment]
    tree: MacroTree
    max_auto_label: int = 0
    diagnostics: ParseDiagnostics = Field(default_factory=ParseDiagnostics)


class GeneratedMacro(BaseModel):
    """Regenerated file text.

    Attributes:
        content: Complete file text.
        filename: Output filename derived from the input filename.
        assigned_labels: Labels given to groups that had none, by node id.
    """

    content: str
    filename: str
    assigned_labels: dict[int, str] = Field(default_factory=dict)
