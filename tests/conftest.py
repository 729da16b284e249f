"""Test setup for settingtree."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


SIMPLE_MACRO = """{
\tTools = ordered() {
\t\tSimpleMacro = GroupOperator {
\t\t\tCtrlWZoom = false,
\t\t\tInputs = ordered() {
\t\t\t\tInput1 = InstanceInput {
\t\t\t\t\tSourceOp = "Blur1",
\t\t\t\t\tSource = "XBlurSize",
\t\t\t\t\tDefault = 1,
\t\t\t\t}
\t\t\t},
\t\t\tOutputs = {
\t\t\t\tMainOutput1 = InstanceOutput {
\t\t\t\t\tSourceOp = "Blur1",
\t\t\t\t\tSource = "Output",
\t\t\t\t}
\t\t\t},
\t\t\tViewInfo = GroupInfo { Pos = { 0, 0 } },
\t\t\tTools = ordered() {
\t\t\t\tBlur1 = Blur {
\t\t\t\t\tInputs = {
\t\t\t\t\t\tXBlurSize = Input { Value = 1, },
\t\t\t\t\t},
\t\t\t\t\tViewInfo = OperatorInfo { Pos = { 0, 0 } },
\t\t\t\t}
\t\t\t},
\t\t}
\t},
\tActiveTool = "SimpleMacro"
}
"""


GROUPED_MACRO = """{
\tTools = ordered() {
\t\tLayoutTool = MacroOperator {
\t\t\tCtrlWZoom = false,
\t\t\tNameSet = true,
\t\t\tInputs = ordered() {
\t\t\t\tMainInput1 = InstanceInput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Background",
\t\t\t\t},
\t\t\t\tInput1 = InstanceInput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Size",
\t\t\t\t\tName = "Size {px}",
\t\t\t\t\tDefault = 1,
\t\t\t\t},
\t\t\t\tInput2 = InstanceInput {
\t\t\t\t\tSourceOp = "background_helper",
\t\t\t\t\tSource = "AutoLabel3",
\t\t\t\t\tPage = "Layout",
\t\t\t\t},
\t\t\t\tInput3 = InstanceInput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Center",
\t\t\t\t\tPage = "Layout",
\t\t\t\t\tDefaultX = 0.5,
\t\t\t\t\tDefaultY = 0.5,
\t\t\t\t},
\t\t\t\tInput4 = InstanceInput {
\t\t\t\t\tSourceOp = "background_helper",
\t\t\t\t\tSource = "AutoLabel5",
\t\t\t\t},
\t\t\t\tInput5 = InstanceInput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Angle",
\t\t\t\t\tOptions = { 0, 90, 180 },
\t\t\t\t},
\t\t\t\tInput6 = InstanceInput {
\t\t\t\t\tSourceOp = "background_helper",
\t\t\t\t\tSource = "HelperSeparator",
\t\t\t\t},
\t\t\t\tInput7 = InstanceInput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Blend",
\t\t\t\t\tPage = "Extra",
\t\t\t\t},
\t\t\t},
\t\t\tOutputs = {
\t\t\t\tMainOutput1 = InstanceOutput {
\t\t\t\t\tSourceOp = "Merge1",
\t\t\t\t\tSource = "Output",
\t\t\t\t}
\t\t\t},
\t\t\tViewInfo = GroupInfo { Pos = { 110, 49.5 } },
\t\t\tTools = ordered() {
\t\t\t\tbackground_helper = Background {
\t\t\t\t\tInputs = {
\t\t\t\t\t\tWidth = Input { Value = 1920, },
\t\t\t\t\t\tHeight = Input { Value = 1080, },
\t\t\t\t\t\tAutoLabel3 = Input { Value = 1, },
\t\t\t\t\t\tAutoLabel5 = Input { Value = 1, },
\t\t\t\t\t},
\t\t\t\t\tViewInfo = OperatorInfo { Pos = { 0, -165 } },
\t\t\t\t\tUserControls = ordered() {
\t\t\t\t\t\tAutoLabel3 = { LBLC_DropDownButton = true, INPID_InputControl = "LabelControl", LBLC_NumInputs = 3, LBLC_NestLevel = 1, LINKID_DataType = "Number", LINKS_Name = "Transform", },
\t\t\t\t\t\tAutoLabel5 = { LBLC_DropDownButton = true, INPID_InputControl = "LabelControl", LBLC_NumInputs = 1, LBLC_NestLevel = 2, LINKID_DataType = "Number", LINKS_Name = "Rotation", },
\t\t\t\t\t\tAutoLabel9 = { INPID_InputControl = "LabelControl", LINKS_Name = "Orphan", },
\t\t\t\t\t}
\t\t\t\t},
\t\t\t\tMerge1 = Merge {
\t\t\t\t\tInputs = {
\t\t\t\t\t\tSize = Input { Value = 1, },
\t\t\t\t\t},
\t\t\t\t\tViewInfo = OperatorInfo { Pos = { 0, 0 } },
\t\t\t\t},
\t\t\t},
\t\t}
\t},
\tActiveTool = "LayoutTool"
}
"""


@pytest.fixture
def simple_macro() -> str:
    """Macro with a single control, no pages, groups or helper tool."""
    return SIMPLE_MACRO


@pytest.fixture
def grouped_macro() -> str:
    """Macro with pages, nested groups, a separator and a hidden main input."""
    return GROUPED_MACRO
