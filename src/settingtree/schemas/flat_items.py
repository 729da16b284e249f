"""Flat declaration items read from the exposed-inputs block."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class PageMarker(BaseModel):
    """Start of a new control page."""

    kind: Literal["page"] = "page"
    name: str


class SeparatorItem(BaseModel):
    """An input declaration whose source is the separator marker."""

    kind: Literal["separator"] = "separator"
    key: str
    properties: dict[str, str] = Field(default_factory=dict)
    original_text: str


class ControlDeclaration(BaseModel):
    """An ``InstanceInput`` declaration: a leaf control or a group proxy.

    Attributes:
        key: Declaration key (``Input3``, ``MainInput1``, ...).
        properties: Extracted properties, without ``Page``.
        original_text: Declaration text from the key to the closing brace.
        hidden: True for ``MainInput<N>`` keys, which are kept but not edited.
    """

    kind: Literal["control"] = "control"
    key: str
    properties: dict[str, str] = Field(default_factory=dict)
    original_text: str
    hidden: bool = False


FlatItem = Annotated[Union[PageMarker, SeparatorItem, ControlDeclaration], Field(discriminator="kind")]
