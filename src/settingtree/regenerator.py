"""Regenerate a setting file from an edited control tree."""

from __future__ import annotations

import logging
import re
from pathlib import PurePath

from settingtree.braces import find_top_level_block
from settingtree.config import (
    DEFAULT_DECLARATION_INDENT,
    DEFAULT_FILENAME,
    SETTINGTREE_DEFAULT_PAGE,
    SETTINGTREE_HELPER_NODE_NAME,
    SETTINGTREE_OUTPUT_SUFFIX,
    SETTINGTREE_SEPARATOR_SOURCE,
)
from settingtree.exceptions import GenerationError, RenameFormatError, StructureNotFoundError
from settingtree.flattener import iter_declarations
from settingtree.properties import find_property, quote_string, set_property
from settingtree.schemas import GeneratedMacro, MacroTree, Node, NodeKind, ParsedMacro, Segment, SegmentKind

logger = logging.getLogger(__name__)

_HELPER_VIEW_INFO_RE = re.compile(r"ViewInfo\s*=\s*OperatorInfo\s*\{")
_DEFAULT_HELPER_VIEW_INFO = "ViewInfo = OperatorInfo { Pos = { 0, -100 } }"


class LabelAllocator:
    """Hands out ``AutoLabel<N>`` labels above every index already in use."""

    def __init__(self, highest: int = 0) -> None:
        self.highest = highest

    def next_label(self) -> str:
        self.highest += 1
        return f"AutoLabel{self.highest}"


def output_filename(filename: str | None, suffix: str = SETTINGTREE_OUTPUT_SUFFIX) -> str:
    """Insert ``suffix`` before the extension: ``macro.setting`` -> ``macro_modified.setting``."""
    path = PurePath(filename or DEFAULT_FILENAME)
    return str(path.with_name(f"{path.stem}{suffix}{path.suffix}"))


def regenerate(
    parsed: ParsedMacro,
    tree: MacroTree | None = None,
    *,
    filename: str | None = None,
    helper_name: str = SETTINGTREE_HELPER_NODE_NAME,
    separator_source: str = SETTINGTREE_SEPARATOR_SOURCE,
    default_page: str = SETTINGTREE_DEFAULT_PAGE,
) -> GeneratedMacro:
    """Write ``tree`` back into the segments of ``parsed``.

    Only the inputs region and the helper region are replaced; every verbatim
    segment is copied unchanged. Neither the tree nor the segments are
    modified. Labels given to groups without one are reported in
    ``assigned_labels``.

    Raises:
        StructureNotFoundError: If the operator lacks its Tools, Outputs or
            ViewInfo blocks.
        GenerationError: If a node cannot be written.
    """
    _check_structure(parsed)
    current = tree or parsed.tree
    inputs_segment = _segment_of(parsed, SegmentKind.INPUTS)
    helper_segment = _segment_of(parsed, SegmentKind.HELPER)

    emitter = _Emitter(
        tree=current,
        allocator=LabelAllocator(max(parsed.max_auto_label, current.max_auto_label())),
        helper_name=helper_name,
        separator_source=separator_source,
        default_page=default_page,
        indent=_declaration_indent(parsed.content, inputs_segment),
    )
    emitter.emit_children(current.root)

    inputs_text = _render_inputs(parsed.content, inputs_segment, emitter)
    helper_text = _render_helper(parsed.content, helper_segment, emitter)

    parts: list[str] = []
    for segment in parsed.segments:
        if segment.kind == SegmentKind.INPUTS:
            parts.append(inputs_text)
        elif segment.kind == SegmentKind.HELPER:
            parts.append(helper_text)
        else:
            parts.append(segment.text)

    return GeneratedMacro(
        content="".join(parts),
        filename=output_filename(filename or parsed.filename),
        assigned_labels=emitter.assigned,
    )


class _Emitter:
    """Depth-first writer producing declarations and helper descriptors."""

    def __init__(
        self,
        *,
        tree: MacroTree,
        allocator: LabelAllocator,
        helper_name: str,
        separator_source: str,
        default_page: str,
        indent: str,
    ) -> None:
        self.tree = tree
        self.allocator = allocator
        self.helper_name = helper_name
        self.separator_source = separator_source
        self.default_page = default_page
        self.indent = indent
        self.declarations: list[str] = []
        self.descriptors: list[str] = []
        self.helper_inputs: list[str] = []
        self.assigned: dict[int, str] = {}
        self.used_keys = {node.key for node in tree.walk() if node.key}
        self.active_page: str | None = None
        self.pending_page: str | None = None

    def emit_children(self, parent: Node) -> None:
        for child in self.tree.children(parent):
            if child.kind == NodeKind.PAGE:
                self.pending_page = child.name or ""
                self.active_page = self.pending_page
                continue
            self.emit(child)

    def emit(self, node: Node) -> None:
        pending, self.pending_page = self.pending_page, None
        if node.kind == NodeKind.CONTROL:
            text = self._control_text(node)
        elif node.kind == NodeKind.SEPARATOR:
            key = node.key or self._next_key("Separator")
            text = self._synthetic_declaration(key, self.separator_source)
        elif node.kind == NodeKind.GROUP:
            text = self._group_text(node)
        else:
            raise GenerationError(f"Node {node.id} of kind {node.kind.value!r} cannot be declared")

        self.declarations.append(self._apply_page(text, pending))
        if node.kind == NodeKind.GROUP:
            self.emit_children(node)

    def _control_text(self, node: Node) -> str:
        if node.original_text is None:
            raise GenerationError(f"Control node {node.id} has no declaration text")
        text = node.original_text
        name = node.properties.get("Name")
        if node.renamed and name:
            try:
                text = set_property(text, "Name", name)
            except RenameFormatError as exc:
                logger.warning("Keeping original declaration of %s: %s", node.key, exc)
        return text

    def _group_text(self, node: Node) -> str:
        label = node.internal_key
        if not label:
            label = self.allocator.next_label()
            self.assigned[node.id] = label
        key = node.key or self._claim_key(label)

        count = self.tree.descendant_count(node)
        nest_level = self.tree.group_depth(node) + 1
        name = _quote_name(node.name or "")
        self.descriptors.append(
            f"{label} = {{ LBLC_DropDownButton = true, INPID_InputControl = \"LabelControl\", "
            f"LBLC_NumInputs = {count}, LBLC_NestLevel = {nest_level}, "
            f"LINKID_DataType = \"Number\", LINKS_Name = {name}, }},"
        )
        self.helper_inputs.append(f"{label} = Input {{ Value = 1, }},")
        return self._synthetic_declaration(key, label)

    def _synthetic_declaration(self, key: str, source: str) -> str:
        inner = self.indent + "\t"
        return (
            f"{key} = InstanceInput {{\n"
            f"{inner}SourceOp = {quote_string(self.helper_name)},\n"
            f"{inner}Source = {quote_string(source)},\n"
            f"{self.indent}}}"
        )

    def _apply_page(self, text: str, pending: str | None) -> str:
        try:
            if pending is not None:
                return set_property(text, "Page", pending)
            current = self.active_page if self.active_page is not None else self.default_page
            span = find_property(text, "Page")
            if span is not None and span.value != current:
                return set_property(text, "Page", current)
        except RenameFormatError as exc:
            raise GenerationError(f"Invalid page name: {exc}") from exc
        return text

    def _claim_key(self, preferred: str) -> str:
        if preferred not in self.used_keys:
            self.used_keys.add(preferred)
            return preferred
        return self._next_key("Group")

    def _next_key(self, prefix: str) -> str:
        index = 1
        while f"{prefix}{index}" in self.used_keys:
            index += 1
        key = f"{prefix}{index}"
        self.used_keys.add(key)
        return key


def _check_structure(parsed: ParsedMacro) -> None:
    diagnostics = parsed.diagnostics
    missing = [
        label
        for label, present in (
            ("Tools", diagnostics.has_tools),
            ("Outputs", diagnostics.has_outputs),
            ("ViewInfo", diagnostics.has_view_info),
        )
        if not present
    ]
    if missing:
        raise StructureNotFoundError(
            f"Could not find {', '.join(repr(name) for name in missing)} in operator {parsed.operator.name!r}"
        )


def _segment_of(parsed: ParsedMacro, kind: SegmentKind) -> Segment:
    for segment in parsed.segments:
        if segment.kind == kind:
            return segment
    raise StructureNotFoundError(f"Parsed macro has no {kind.value} segment")


def _quote_name(name: str) -> str:
    try:
        return quote_string(name)
    except RenameFormatError as exc:
        logger.warning("Dropping control characters from group name: %s", exc)
        return quote_string("".join(char for char in name if ord(char) >= 0x20 and ord(char) != 0x7F))


def _line_indent(content: str, pos: int) -> str:
    """Leading whitespace of the line containing ``pos``."""
    line_start = content.rfind("\n", 0, pos) + 1
    i = line_start
    while i < len(content) and content[i] in " \t":
        i += 1
    return content[line_start:i]


def _declaration_indent(content: str, segment: Segment) -> str:
    if segment.synthesized:
        return _line_indent(content, segment.start) + "\t"
    declarations = list(iter_declarations(segment.text))
    if declarations:
        return _line_indent(segment.text, declarations[0].start)
    closing = _closing_indent(segment.text)
    return closing + "\t" if closing else DEFAULT_DECLARATION_INDENT


def _closing_indent(text: str) -> str:
    tail = text[text.rfind("\n") + 1 :]
    return tail if tail.strip(" \t") == "" and "\n" in text else ""


def _render_inputs(content: str, segment: Segment, emitter: _Emitter) -> str:
    declarations = emitter.declarations
    indent = emitter.indent

    if segment.synthesized:
        if not declarations:
            return ""
        outer = _line_indent(content, segment.start)
        body = "".join(f"{indent}{text},\n" for text in declarations)
        return f"{outer}Inputs = ordered() {{\n{body}{outer}}},\n"

    originals = list(iter_declarations(segment.text))
    if not declarations and not originals:
        return segment.text

    trailing_comma = True
    if originals:
        rest = segment.text[originals[-1].end :].lstrip()
        trailing_comma = rest.startswith(",")
    lines = [f"{indent}{text}," for text in declarations]
    if lines and not trailing_comma:
        lines[-1] = lines[-1][:-1]
    closing = _closing_indent(segment.text) if "\n" in segment.text else indent[:-1]
    return "\n" + "".join(line + "\n" for line in lines) + closing


def _render_helper(content: str, segment: Segment, emitter: _Emitter) -> str:
    if segment.synthesized:
        indent = _line_indent(content, segment.start)
        if content[segment.start : segment.start + len(indent) + 1].strip() == "}":
            indent += "\t"
        indent = indent or DEFAULT_DECLARATION_INDENT
    else:
        indent = _line_indent(content, segment.start)

    view_info = _DEFAULT_HELPER_VIEW_INFO
    if segment.text:
        block = find_top_level_block(segment.text, _HELPER_VIEW_INFO_RE, segment.text.find("{") + 1)
        if block is not None:
            view_info = segment.text[block.start : block.end]

    inner = indent + "\t"
    entries = inner + "\t"
    separator = (
        f"{emitter.separator_source} = {{ INPID_InputControl = \"SeparatorControl\", "
        f"INP_External = false, LINKID_DataType = \"Number\", LINKS_Name = \"\", }},"
    )
    lines = [
        f"{emitter.helper_name} = Background {{",
        f"{inner}CtrlWZoom = false,",
        f"{inner}Inputs = {{",
        f"{entries}Width = Input {{ Value = 1920, }},",
        f"{entries}Height = Input {{ Value = 1080, }},",
        *(entries + line for line in emitter.helper_inputs),
        f"{inner}}},",
        f"{inner}{view_info},",
        f"{inner}UserControls = ordered() {{",
        entries + separator,
        *(entries + line for line in emitter.descriptors),
        f"{inner}}}",
        f"{indent}}}",
    ]
    text = "\n".join(lines)
    if segment.synthesized:
        return f"{indent}{text},\n"
    return text
