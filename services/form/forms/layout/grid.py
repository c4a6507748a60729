"""Value types shared by the layout packer, validator and reverse mapper."""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Union

QuestionId = Union[int, str]

ROW_CAPACITY = 12
MAX_CELLS_PER_ROW = 3

ALLOWED_SPANS: FrozenSet[int] = frozenset({12, 8, 6, 4})
ALLOWED_COLUMNS: FrozenSet[int] = frozenset({1, 2, 3})
ALLOWED_ROW_SIGNATURES: FrozenSet[str] = frozenset({"12", "6,6", "4,4,4", "4,8", "8,4"})


class WidthClass(str, enum.Enum):
    """Width of a placed question, expressed as a fraction of a row."""

    FULL = "full"
    TWO_THIRDS = "two_thirds"
    HALF = "half"
    ONE_THIRD = "one_third"

    @property
    def span(self) -> int:
        return _WIDTH_TO_SPAN[self]


_WIDTH_TO_SPAN = {
    WidthClass.FULL: 12,
    WidthClass.TWO_THIRDS: 8,
    WidthClass.HALF: 6,
    WidthClass.ONE_THIRD: 4,
}
_SPAN_TO_WIDTH = {span: width for width, span in _WIDTH_TO_SPAN.items()}

WIDTH_CHOICES = [
    (WidthClass.FULL.value, "Full"),
    (WidthClass.TWO_THIRDS.value, "Two thirds"),
    (WidthClass.HALF.value, "Half"),
    (WidthClass.ONE_THIRD.value, "One third"),
]


def width_to_span(width: WidthClass) -> int:
    return _WIDTH_TO_SPAN[WidthClass(width)]


def span_to_width(span: int) -> WidthClass:
    try:
        return _SPAN_TO_WIDTH[span]
    except KeyError:
        raise ValueError(f"span must be one of 12, 8, 6 or 4, got {span!r}") from None


def row_signature(spans: Iterable[int]) -> str:
    return ",".join(str(span) for span in spans)


def column_class(span: int) -> str:
    """Bootstrap column class for a cell of the given span."""

    return f"col-md-{span}"


def new_instance_id() -> str:
    return f"inst_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class PlacementInstance:
    """One card on the editor canvas.

    ``instance_id`` only identifies the card inside an editing session; the
    same question may appear on several cards.
    """

    instance_id: str
    question_id: QuestionId
    width: WidthClass = WidthClass.FULL

    @property
    def span(self) -> int:
        return width_to_span(self.width)


@dataclass(frozen=True)
class GridCell:
    """A persisted grid position. ``col`` is a slot index (1..3) within the row."""

    question_id: QuestionId
    row: int
    col: int
    span: int

    @property
    def width(self) -> WidthClass:
        return span_to_width(self.span)
