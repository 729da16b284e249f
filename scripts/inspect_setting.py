"""Inspect how a macro .setting file is segmented and rebuilt as a tree."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from settingtree import MacroTree, Node, NodeKind, parse_macro, regenerate
from settingtree.properties import display_name


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the control tree, segments and diagnostics of a macro.")
    parser.add_argument("file", help="Path to a .setting file")
    parser.add_argument("--write", action="store_true", help="Write the regenerated file next to the input")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    path = Path(args.file)
    if not path.is_file():
        raise FileNotFoundError(f"Setting file not found: {path}")
    parsed = parse_macro(path.read_text(encoding="utf-8"), filename=path.name)

    print(f"Operator: {parsed.operator.name} ({parsed.operator.kind})")
    print(f"Highest AutoLabel index: {parsed.max_auto_label}")

    print("\nTree:")
    for line in render_tree(parsed.tree):
        print(line)

    print("\nSegments:")
    for segment in parsed.segments:
        flag = " (synthesized)" if segment.synthesized else ""
        print(f"{segment.kind.value}: {segment.start}-{segment.end}{flag}")

    print("\nDiagnostics:")
    for name, value in parsed.diagnostics.model_dump().items():
        if isinstance(value, str):
            value = value.strip().replace("\n", " ")[:60]
        print(f"{name}: {value}")

    if args.write:
        generated = regenerate(parsed)
        output = path.with_name(generated.filename)
        output.write_text(generated.content, encoding="utf-8")
        print(f"\nWrote {output}")


def render_tree(tree: MacroTree, node: Node | None = None, depth: int = 0) -> list[str]:
    lines: list[str] = []
    for child in tree.children(node or tree.root):
        if child.kind == NodeKind.PAGE:
            lines.append(f"--- Page: {child.name} ---")
            continue
        prefix = "    " * depth
        if child.kind == NodeKind.GROUP:
            lines.append(f"{prefix}> {child.name} [{child.internal_key or 'new'}]")
            lines.extend(render_tree(tree, child, depth + 1))
        elif child.kind == NodeKind.SEPARATOR:
            lines.append(f"{prefix}----")
        else:
            hidden = " (hidden)" if child.hidden else ""
            lines.append(f"{prefix}{display_name(child.properties, child.key)}{hidden}")
    return lines


if __name__ == "__main__":
    main()
