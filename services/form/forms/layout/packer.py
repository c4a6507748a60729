"""Greedy row packing of editor instances into grid cells."""
from __future__ import annotations

from typing import Iterable, List, Tuple, Union

from .grid import ROW_CAPACITY, GridCell, PlacementInstance, QuestionId, WidthClass, width_to_span

PackInput = Union[PlacementInstance, Tuple[QuestionId, WidthClass]]


def _unpack(item: PackInput) -> Tuple[QuestionId, WidthClass]:
    if isinstance(item, PlacementInstance):
        return item.question_id, item.width
    question_id, width = item
    return question_id, WidthClass(width)


def pack(instances: Iterable[PackInput]) -> List[GridCell]:
    """Lay instances out left to right, wrapping when a row would exceed 12.

    Rows are never compacted: an item that does not fit the remaining space
    opens a new row and leaves the previous one short.
    """

    cells: List[GridCell] = []
    row, col, accumulated = 1, 1, 0
    for item in instances:
        question_id, width = _unpack(item)
        span = width_to_span(width)
        if accumulated + span > ROW_CAPACITY:
            row, col, accumulated = row + 1, 1, 0
        cells.append(GridCell(question_id=question_id, row=row, col=col, span=span))
        accumulated += span
        col += 1
    return cells


def rows(instances: Iterable[PackInput]) -> List[range]:
    """Index ranges of the visual rows an instance sequence packs into."""

    groups: List[range] = []
    start = 0
    accumulated = 0
    index = -1
    for index, item in enumerate(instances):
        span = width_to_span(_unpack(item)[1])
        if accumulated + span > ROW_CAPACITY:
            groups.append(range(start, index))
            start, accumulated = index, 0
        accumulated += span
        if accumulated == ROW_CAPACITY:
            groups.append(range(start, index + 1))
            start, accumulated = index + 1, 0
    if start <= index:
        groups.append(range(start, index + 1))
    return groups
