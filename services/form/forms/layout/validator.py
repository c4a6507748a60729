"""Structural checks applied to a grid before it is persisted."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple, Union

from .errors import (
    DuplicateSlot,
    EmptyLayout,
    InvalidCellField,
    InvalidRowLayout,
    LayoutError,
    RowSumMismatch,
)
from .grid import (
    ALLOWED_COLUMNS,
    ALLOWED_ROW_SIGNATURES,
    ALLOWED_SPANS,
    ROW_CAPACITY,
    GridCell,
    row_signature,
)

CellInput = Union[GridCell, Mapping[str, Any]]

QUESTION_KEYS = ("question_id", "question", "qid")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(index: int, cell: CellInput) -> Tuple[Any, Any, Any, Any]:
    if isinstance(cell, GridCell):
        return cell.question_id, cell.row, cell.col, cell.span
    if not isinstance(cell, Mapping):
        raise InvalidCellField(f"cell {index} must be an object", index=index, field=None)
    question_id = next((cell[key] for key in QUESTION_KEYS if key in cell), None)
    return question_id, cell.get("row"), cell.get("col"), cell.get("span")


def _check_fields(index: int, question_id: Any, row: Any, col: Any, span: Any) -> None:
    if question_id is None or question_id == "":
        raise InvalidCellField(f"cell {index}: question is required", index=index, field="question_id")
    if not (_is_int(question_id) or isinstance(question_id, str)):
        raise InvalidCellField(
            f"cell {index}: question must be an id", index=index, field="question_id", value=question_id
        )
    if not _is_int(row) or row < 1:
        raise InvalidCellField(f"cell {index}: row must be >= 1", index=index, field="row", value=row)
    if not _is_int(col) or col not in ALLOWED_COLUMNS:
        raise InvalidCellField(f"cell {index}: col must be 1..3", index=index, field="col", value=col)
    if not _is_int(span) or span not in ALLOWED_SPANS:
        raise InvalidCellField(
            f"cell {index}: span must be 12|8|6|4", index=index, field="span", value=span
        )


def validate_layout(cells: Iterable[CellInput]) -> List[GridCell]:
    """Validate a complete layout and return it as ``GridCell`` values.

    Checks run in a fixed order and the first failure is raised: empty
    layout, per-cell fields, slot uniqueness, row signature, row sum.
    """

    items = list(cells)
    if not items:
        raise EmptyLayout("layout must contain at least one cell")

    validated: List[GridCell] = []
    for index, cell in enumerate(items):
        question_id, row, col, span = _coerce(index, cell)
        _check_fields(index, question_id, row, col, span)
        validated.append(GridCell(question_id=question_id, row=row, col=col, span=span))

    seen: Set[Tuple[int, int]] = set()
    by_row: Dict[int, List[GridCell]] = defaultdict(list)
    for cell in validated:
        slot = (cell.row, cell.col)
        if slot in seen:
            raise DuplicateSlot(
                f"duplicate slot row={cell.row} col={cell.col}", row=cell.row, col=cell.col
            )
        seen.add(slot)
        by_row[cell.row].append(cell)

    for row in sorted(by_row):
        ordered = sorted(by_row[row], key=lambda cell: cell.col)
        signature = row_signature(cell.span for cell in ordered)
        if signature not in ALLOWED_ROW_SIGNATURES:
            raise InvalidRowLayout(
                f"row {row} invalid layout ({signature})", row=row, signature=signature
            )
        total = sum(cell.span for cell in ordered)
        if total != ROW_CAPACITY:
            raise RowSumMismatch(f"row {row} must sum to {ROW_CAPACITY}", row=row, total=total)

    return validated


def is_valid_layout(cells: Iterable[CellInput]) -> bool:
    try:
        validate_layout(cells)
    except LayoutError:
        return False
    return True
