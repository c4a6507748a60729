"""Grid layout packing, validation and reverse mapping for form canvases."""
from __future__ import annotations

from .editor import DropPolicy, EditorState
from .errors import (
    DuplicateSlot,
    EmptyLayout,
    InvalidCellField,
    InvalidRowLayout,
    LayoutError,
    RowSumMismatch,
)
from .grid import (
    ALLOWED_ROW_SIGNATURES,
    ROW_CAPACITY,
    GridCell,
    PlacementInstance,
    WidthClass,
    column_class,
    new_instance_id,
    row_signature,
    span_to_width,
    width_to_span,
)
from .mapper import to_instances
from .packer import pack, rows
from .validator import is_valid_layout, validate_layout

__all__ = [
    "ALLOWED_ROW_SIGNATURES",
    "ROW_CAPACITY",
    "DropPolicy",
    "DuplicateSlot",
    "EditorState",
    "EmptyLayout",
    "GridCell",
    "InvalidCellField",
    "InvalidRowLayout",
    "LayoutError",
    "PlacementInstance",
    "RowSumMismatch",
    "WidthClass",
    "column_class",
    "is_valid_layout",
    "new_instance_id",
    "pack",
    "row_signature",
    "rows",
    "span_to_width",
    "to_instances",
    "validate_layout",
    "width_to_span",
]
