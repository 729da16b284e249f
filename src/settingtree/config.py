"""Local configuration for settingtree."""

from __future__ import annotations

import os


DEFAULT_PAGE_NAME = "Controls"
DEFAULT_HELPER_NODE_NAME = "background_helper"
DEFAULT_SEPARATOR_SOURCE = "HelperSeparator"
DEFAULT_OUTPUT_SUFFIX = "_modified"
DEFAULT_FILENAME = "macro.setting"
DEFAULT_PROPERTY_INDENT = "\t" * 5
DEFAULT_DECLARATION_INDENT = "\t" * 4
DEFAULT_SNIPPET_LENGTH = 200

# Page a control belongs to when its declaration carries no Page property.
SETTINGTREE_DEFAULT_PAGE = os.getenv("SETTINGTREE_DEFAULT_PAGE", DEFAULT_PAGE_NAME)
# Tool inside the macro that stores group descriptors.
SETTINGTREE_HELPER_NODE_NAME = os.getenv("SETTINGTREE_HELPER_NODE_NAME", DEFAULT_HELPER_NODE_NAME)
SETTINGTREE_SEPARATOR_SOURCE = os.getenv("SETTINGTREE_SEPARATOR_SOURCE", DEFAULT_SEPARATOR_SOURCE)
SETTINGTREE_OUTPUT_SUFFIX = os.getenv("SETTINGTREE_OUTPUT_SUFFIX", DEFAULT_OUTPUT_SUFFIX)
SETTINGTREE_SNIPPET_LENGTH = int(os.getenv("SETTINGTREE_SNIPPET_LENGTH", str(DEFAULT_SNIPPET_LENGTH)))
