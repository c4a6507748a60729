"""Rebuild the editor's instance list from a stored grid."""
from __future__ import annotations

from typing import Iterable, List

from .grid import GridCell, PlacementInstance, new_instance_id, span_to_width


def to_instances(cells: Iterable[GridCell]) -> List[PlacementInstance]:
    """Order cells top-to-bottom, left-to-right and restore their widths.

    Instance ids are freshly generated; they are never persisted.
    """

    ordered = sorted(cells, key=lambda cell: (cell.row, cell.col))
    return [
        PlacementInstance(
            instance_id=new_instance_id(),
            question_id=cell.question_id,
            width=span_to_width(cell.span),
        )
        for cell in ordered
    ]
