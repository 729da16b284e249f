"""Extract and rewrite ``key = value`` properties inside declaration bodies."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Mapping

from settingtree.braces import find_matching_brace, skip_string
from settingtree.config import DEFAULT_PROPERTY_INDENT
from settingtree.exceptions import RenameFormatError

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r'(?:([A-Za-z_]\w*)|\[\s*"((?:[^"\\]|\\.)*)"\s*\])\s*=\s*')
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}
_QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


@dataclass(frozen=True)
class PropertySpan:
    """A single property located inside a declaration.

    Attributes:
        key: Property name.
        start: Offset of the first character of the key.
        value_start: Offset of the first character of the raw value.
        value_end: Offset just past the raw value.
        value: Decoded value (quotes removed for strings, raw text otherwise).
    """

    key: str
    start: int
    value_start: int
    value_end: int
    value: str


def extract_properties(body: str) -> dict[str, str]:
    """Extract the depth-zero properties of a declaration body.

    Quoted strings are unescaped, brace-delimited literals and bare tokens are
    kept as text. Values that match no recognised shape are kept raw.
    """
    return {span.key: span.value for span in iter_property_spans(body)}


def iter_property_spans(text: str, start: int = 0, end: int | None = None) -> Iterator[PropertySpan]:
    """Yield property spans found at brace depth zero of ``text[start:end]``."""
    stop = len(text) if end is None else end
    i = start
    while i < stop:
        while i < stop and (text[i].isspace() or text[i] == ","):
            i += 1
        if i >= stop:
            break
        match = _KEY_RE.match(text, i, stop)
        if not match:
            next_i = _skip_to_separator(text, i, stop)
            logger.debug("Skipping unrecognised property text %r", text[i:next_i])
            i = max(next_i, i + 1)
            continue
        key = match.group(1) or unescape_string(match.group(2))
        value_start = match.end()
        value_end, value = _read_value(text, value_start, stop)
        yield PropertySpan(key, i, value_start, value_end, value)
        i = max(value_end, value_start + 1)


def find_property(declaration: str, key: str) -> PropertySpan | None:
    """Find ``key`` among the top-level properties of a declaration's block."""
    bounds = _block_bounds(declaration)
    if bounds is None:
        return None
    open_brace, close_brace = bounds
    for span in iter_property_spans(declaration, open_brace + 1, close_brace):
        if span.key == key:
            return span
    return None


def set_property(declaration: str, key: str, value: str, *, quoted: bool = True) -> str:
    """Return ``declaration`` with ``key`` set to ``value``.

    An existing property has only its value replaced; a missing one is
    inserted right after the opening brace, indented like the line that
    follows it. Declarations that already carry the value are returned
    unchanged.

    Raises:
        RenameFormatError: If ``value`` cannot be written as a quoted string.
    """
    new_value = quote_string(value) if quoted else value
    span = find_property(declaration, key)
    if span is not None:
        if declaration[span.value_start : span.value_end] == new_value:
            return declaration
        return declaration[: span.value_start] + new_value + declaration[span.value_end :]

    bounds = _block_bounds(declaration)
    if bounds is None:
        raise RenameFormatError(f"Declaration has no property block to hold {key!r}")
    open_brace = bounds[0]
    indent = _next_line_indent(declaration, open_brace + 1) or DEFAULT_PROPERTY_INDENT
    insertion = f"\n{indent}{key} = {new_value},"
    return declaration[: open_brace + 1] + insertion + declaration[open_brace + 1 :]


def quote_string(value: str) -> str:
    """Quote ``value`` as a setting-format string literal.

    Raises:
        RenameFormatError: If the value holds control characters the format
            cannot escape.
    """
    parts: list[str] = []
    for char in value:
        if char in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            raise RenameFormatError(f"Cannot encode control character {char!r} in {value!r}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


def unescape_string(raw: str) -> str:
    """Decode backslash escapes from the inside of a quoted string."""
    if "\\" not in raw:
        return raw
    result: list[str] = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == "\\" and i + 1 < len(raw):
            nxt = raw[i + 1]
            result.append(_ESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        result.append(char)
        i += 1
    return "".join(result)


def display_name(properties: Mapping[str, str], key: str | None = None) -> str:
    """Name shown for a control: ``Name``, ``LINKS_Name``, ``Source`` or the key."""
    for candidate in ("Name", "LINKS_Name", "Source"):
        value = properties.get(candidate)
        if value:
            return value
    return key or ""


def _read_value(text: str, pos: int, stop: int) -> tuple[int, str]:
    if pos >= stop:
        return pos, ""
    char = text[pos]
    if char == '"':
        close = skip_string(text, pos)
        if close > stop or text[close - 1] != '"' or close - 1 == pos:
            return _read_raw(text, pos, stop)
        return close, unescape_string(text[pos + 1 : close - 1])
    if char == "{":
        close_brace = find_matching_brace(text, pos)
        if close_brace is None or close_brace >= stop:
            return _read_raw(text, pos, stop)
        return close_brace + 1, text[pos : close_brace + 1]

    i = pos
    while i < stop and not (text[i].isspace() or text[i] in ",{}"):
        i += 1
    if i == pos:
        return _read_raw(text, pos, stop)
    # Constructor-style values such as ``Input { Value = 1, }`` keep their block.
    j = i
    while j < stop and text[j].isspace():
        j += 1
    if j < stop and text[j] == "{":
        close_brace = find_matching_brace(text, j)
        if close_brace is not None and close_brace < stop:
            return close_brace + 1, text[pos : close_brace + 1]
    return i, text[pos:i]


def _read_raw(text: str, pos: int, stop: int) -> tuple[int, str]:
    end = _skip_to_separator(text, pos, stop)
    raw = text[pos:end].strip()
    logger.debug("Keeping malformed property value as raw text: %r", raw)
    return end, raw


def _skip_to_separator(text: str, pos: int, stop: int) -> int:
    i = pos
    while i < stop:
        char = text[i]
        if char == '"':
            i = min(skip_string(text, i), stop)
            continue
        if char == "{":
            close_brace = find_matching_brace(text, i)
            if close_brace is None or close_brace >= stop:
                return stop
            i = close_brace + 1
            continue
        if char in ",}":
            return i
        i += 1
    return stop


def _block_bounds(declaration: str) -> tuple[int, int] | None:
    i = 0
    while i < len(declaration):
        char = declaration[i]
        if char == '"':
            i = skip_string(declaration, i)
            continue
        if char == "{":
            close_brace = find_matching_brace(declaration, i)
            return (i, close_brace) if close_brace is not None else None
        i += 1
    return None


def _next_line_indent(text: str, pos: int) -> str | None:
    newline = text.find("\n", pos)
    if newline == -1:
        return None
    line_start = newline + 1
    i = line_start
    while i < len(text) and text[i] in " \t":
        i += 1
    indent = text[line_start:i]
    if i < len(text) and text[i] == "}":
        return indent + "\t"
    return indent
