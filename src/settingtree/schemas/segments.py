"""Segments that tile a setting file."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from settingtree.schemas.flat_items import FlatItem
from settingtree.schemas.metadata import MetadataEntry


class SegmentKind(str, Enum):
    """Enumeration for segment kinds."""

    VERBATIM = "verbatim"
    INPUTS = "inputs-region"
    HELPER = "helper-region"


class Segment(BaseModel):
    """A contiguous span of the original file.

    Attributes:
        kind: Verbatim text or one of the two regenerated regions.
        start: Offset of the first character in the original file.
        end: Offset just past the last character.
        text: The original text of the span.
        synthesized: True for a zero-length insertion point standing in for
            a block the file does not have.
        items: Flat declarations (inputs region only).
        metadata: Group descriptors (helper region only).
    """

    kind: SegmentKind
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    text: str
    synthesized: bool = False
    items: list[FlatItem] = Field(default_factory=list)
    metadata: dict[str, MetadataEntry] = Field(default_factory=dict)
