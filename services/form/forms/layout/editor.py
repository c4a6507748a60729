"""Immutable editor state for arranging question cards on a form canvas.

Every operation returns a new ``EditorState``; the packer and validator are
only ever applied to snapshots via ``to_cells``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from .grid import (
    ALLOWED_SPANS,
    ROW_CAPACITY,
    GridCell,
    PlacementInstance,
    QuestionId,
    WidthClass,
    new_instance_id,
    span_to_width,
)
from .mapper import to_instances
from .packer import pack, rows


class DropPolicy(str, enum.Enum):
    """How a question dropped onto an existing row is sized.

    ``FULL`` always places a full-width card, which wraps onto its own row.
    ``FIT_REMAINDER`` sizes the card to the space left in the target row
    when that space is a valid span, otherwise it opens a new full row.
    """

    FULL = "full"
    FIT_REMAINDER = "fit_remainder"


@dataclass(frozen=True)
class EditorState:
    instances: Tuple[PlacementInstance, ...] = ()

    @classmethod
    def from_cells(cls, cells: Iterable[GridCell]) -> "EditorState":
        return cls(tuple(to_instances(cells)))

    def to_cells(self) -> List[GridCell]:
        return pack(self.instances)

    def rows(self) -> List[range]:
        return rows(self.instances)

    def index_of(self, instance_id: str) -> int:
        for index, instance in enumerate(self.instances):
            if instance.instance_id == instance_id:
                return index
        raise KeyError(instance_id)

    def row_remainder(self, row_index: int) -> int:
        row = self.rows()[row_index]
        return ROW_CAPACITY - sum(self.instances[i].span for i in row)

    def _insert(self, index: int, instance: PlacementInstance) -> "EditorState":
        items = list(self.instances)
        items.insert(max(0, min(index, len(items))), instance)
        return replace(self, instances=tuple(items))

    def _row_start(self, row_index: int) -> int:
        groups = self.rows()
        if not groups:
            return len(self.instances)
        if row_index <= 0:
            return groups[0].start
        if row_index >= len(groups):
            return groups[-1].stop
        return groups[row_index].start

    def _place_new_row(self, row_index: int, instance: PlacementInstance) -> "EditorState":
        return self._insert(self._row_start(row_index), replace(instance, width=WidthClass.FULL))

    def _fitted(self, row_index: int, instance: PlacementInstance, policy: DropPolicy) -> "EditorState":
        row = self.rows()[row_index]
        remainder = self.row_remainder(row_index)
        if policy is DropPolicy.FIT_REMAINDER and remainder in ALLOWED_SPANS:
            return self._insert(row.stop, replace(instance, width=span_to_width(remainder)))
        return self._place_new_row(row_index + 1, instance)

    def insert_row(self, row_index: int, question_id: QuestionId) -> "EditorState":
        """Drop a question on the divider before ``row_index`` as a new full row."""

        return self._place_new_row(row_index, PlacementInstance(new_instance_id(), question_id))

    def append(self, question_id: QuestionId, policy: DropPolicy = DropPolicy.FULL) -> "EditorState":
        """Drop a question on the canvas background."""

        instance = PlacementInstance(new_instance_id(), question_id)
        if not self.instances:
            return self._insert(0, instance)
        return self._fitted(len(self.rows()) - 1, instance, policy)

    def drop_into_row(
        self,
        row_index: int,
        question_id: QuestionId,
        policy: DropPolicy = DropPolicy.FULL,
    ) -> "EditorState":
        """Drop a question on a card of row ``row_index``."""

        instance = PlacementInstance(new_instance_id(), question_id)
        groups = self.rows()
        if not 0 <= row_index < len(groups):
            return self._place_new_row(len(groups), instance)
        return self._fitted(row_index, instance, policy)

    def remove(self, instance_id: str) -> "EditorState":
        index = self.index_of(instance_id)
        return replace(self, instances=self.instances[:index] + self.instances[index + 1:])

    def move(self, instance_id: str, to_index: int) -> "EditorState":
        """Reorder a card, keeping its width. ``to_index`` refers to the list without it."""

        instance = self.instances[self.index_of(instance_id)]
        return self.remove(instance_id)._insert(to_index, instance)

    def move_to_row(self, instance_id: str, row_index: Optional[int] = None) -> "EditorState":
        """Move a card onto a row divider; it becomes a full-width row.

        ``row_index`` is counted on the layout without the moved card; ``None``
        moves it to a new last row.
        """

        instance = self.instances[self.index_of(instance_id)]
        without = self.remove(instance_id)
        if row_index is None:
            row_index = len(without.rows())
        return without._place_new_row(row_index, instance)

    def resize(self, instance_id: str, width: WidthClass) -> "EditorState":
        index = self.index_of(instance_id)
        items = list(self.instances)
        items[index] = replace(items[index], width=WidthClass(width))
        return replace(self, instances=tuple(items))
