"""Turn the exposed-inputs block into a flat, ordered item sequence."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from settingtree.braces import iter_top_level_blocks
from settingtree.config import SETTINGTREE_DEFAULT_PAGE, SETTINGTREE_SEPARATOR_SOURCE
from settingtree.properties import extract_properties
from settingtree.schemas import ControlDeclaration, FlatItem, PageMarker, SeparatorItem

_DECLARATION_RE = re.compile(r"([A-Za-z0-9_]+)\s*=\s*InstanceInput\s*\{")
_HIDDEN_KEY_RE = re.compile(r"^MainInput\d+$", re.IGNORECASE)


@dataclass(frozen=True)
class RawDeclaration:
    """One ``key = InstanceInput { ... }`` declaration and its location."""

    key: str
    start: int
    end: int
    text: str
    body: str


def iter_declarations(body: str) -> Iterator[RawDeclaration]:
    """Yield the depth-zero ``InstanceInput`` declarations of an inputs body."""
    for match, span in iter_top_level_blocks(body, _DECLARATION_RE):
        yield RawDeclaration(
            key=match.group(1),
            start=span.start,
            end=span.end,
            text=body[span.start : span.end],
            body=span.content(body),
        )


def is_hidden_key(key: str) -> bool:
    """``MainInput<N>`` inputs are kept in the tree but not offered for editing."""
    return bool(_HIDDEN_KEY_RE.match(key))


def flatten_inputs(
    body: str,
    *,
    default_page: str = SETTINGTREE_DEFAULT_PAGE,
    separator_source: str = SETTINGTREE_SEPARATOR_SOURCE,
) -> list[FlatItem]:
    """Flatten an inputs body into page markers, separators and controls.

    A page marker is emitted before a declaration whose ``Page`` differs from
    the page currently open, starting from ``default_page``. A declaration
    without ``Page`` stays on the page opened before it. ``Page`` is removed
    from every item's properties.
    """
    items: list[FlatItem] = []
    current_page = default_page

    for declaration in iter_declarations(body):
        properties = extract_properties(declaration.body)
        page = properties.pop("Page", None)
        if page and page != current_page:
            items.append(PageMarker(name=page))
            current_page = page

        if properties.get("Source") == separator_source:
            items.append(
                SeparatorItem(key=declaration.key, properties=properties, original_text=declaration.text)
            )
            continue
        items.append(
            ControlDeclaration(
                key=declaration.key,
                properties=properties,
                original_text=declaration.text,
                hidden=is_hidden_key(declaration.key),
            )
        )
    return items
