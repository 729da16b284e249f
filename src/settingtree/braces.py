"""Balanced-brace scanning over setting text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class BlockSpan:
    """Location of a ``header { ... }`` block inside a larger text.

    Attributes:
        start: Offset of the first character of the header.
        open_brace: Offset of the opening brace.
        close_brace: Offset of the matching closing brace.
    """

    start: int
    open_brace: int
    close_brace: int

    @property
    def content_start(self) -> int:
        return self.open_brace + 1

    @property
    def end(self) -> int:
        return self.close_brace + 1

    def content(self, text: str) -> str:
        """Return the text between the braces."""
        return text[self.content_start : self.close_brace]

    def shifted(self, offset: int) -> BlockSpan:
        return BlockSpan(self.start + offset, self.open_brace + offset, self.close_brace + offset)


def skip_string(text: str, pos: int) -> int:
    """Return the offset just past the quoted string opening at ``pos``.

    Backslash escapes are honoured. An unterminated string runs to the end of
    the text.
    """
    i = pos + 1
    length = len(text)
    while i < length:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == '"':
            return i + 1
        i += 1
    return length


def find_matching_brace(text: str, start_pos: int) -> int | None:
    """Find position of closing brace matching opening brace at start_pos.

    Braces inside quoted strings are ignored. Returns None if ``start_pos`` is
    not an opening brace or the block is never closed.
    """
    if start_pos >= len(text) or text[start_pos] != "{":
        return None

    depth = 0
    i = start_pos
    length = len(text)
    while i < length:
        char = text[i]
        if char == '"':
            i = skip_string(text, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def find_block(text: str, header: str, start: int = 0) -> BlockSpan | None:
    """Find the first ``header`` at or after ``start`` and its balanced block.

    The header is matched literally. If it does not end with ``{`` the opening
    brace may follow after whitespace. Returns None when the header is absent
    or its block is unbalanced; callers treat both as "feature absent".
    """
    index = text.find(header, start)
    if index == -1:
        return None

    open_brace = _brace_after(text, index, index + len(header))
    if open_brace is None:
        return None
    close_brace = find_matching_brace(text, open_brace)
    if close_brace is None:
        return None
    return BlockSpan(index, open_brace, close_brace)


def find_top_level_block(
    text: str,
    header: str | re.Pattern[str],
    start: int = 0,
    end: int | None = None,
) -> BlockSpan | None:
    """Like :func:`find_block`, but only matches headers at brace depth zero.

    Scanning is limited to ``text[start:end]``; a closing brace that would take
    the depth below zero ends the search.
    """
    for _, span in iter_top_level_blocks(text, header, start, end):
        return span
    return None


def iter_top_level_blocks(
    text: str,
    header: str | re.Pattern[str],
    start: int = 0,
    end: int | None = None,
) -> Iterator[tuple[re.Match[str], BlockSpan]]:
    """Yield every depth-zero ``header { ... }`` block in ``text[start:end]``.

    ``header`` is a literal string or a compiled pattern; patterns are matched
    at each candidate offset and the block opens at the first brace at or
    after the end of the match.
    """
    pattern = re.compile(re.escape(header)) if isinstance(header, str) else header
    stop = len(text) if end is None else end
    depth = 0
    i = start
    while i < stop:
        char = text[i]
        if char == '"':
            i = skip_string(text, i)
            continue
        if depth == 0 and _at_word_start(text, i, start):
            match = pattern.match(text, i, stop)
            if match:
                open_brace = _brace_after(text, i, match.end(), stop)
                close_brace = find_matching_brace(text, open_brace) if open_brace is not None else None
                if close_brace is None or close_brace >= stop:
                    return
                yield match, BlockSpan(i, open_brace, close_brace)
                i = close_brace + 1
                continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return
        i += 1


def _at_word_start(text: str, pos: int, floor: int) -> bool:
    if pos <= floor:
        return True
    previous = text[pos - 1]
    return not (previous.isalnum() or previous == "_")


def _brace_after(text: str, header_start: int, header_end: int, stop: int | None = None) -> int | None:
    if header_end > header_start and text[header_end - 1] == "{":
        return header_end - 1
    limit = len(text) if stop is None else stop
    i = header_end
    while i < limit and text[i].isspace():
        i += 1
    if i < limit and text[i] == "{":
        return i
    return None
