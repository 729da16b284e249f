"""Group descriptor metadata stored in the helper node."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MetadataEntry(BaseModel):
    """Descriptor for one group label.

    ``subtree_size`` counts every flat declaration below the group, not only
    its direct children.
    """

    name: str
    nest_level: int = Field(..., ge=0)
    subtree_size: int = Field(..., ge=0)


class HelperMetadata(BaseModel):
    """Descriptors keyed by label plus the highest ``AutoLabel<N>`` index seen."""

    entries: dict[str, MetadataEntry] = Field(default_factory=dict)
    max_auto_label: int = 0
