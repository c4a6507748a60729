"""Exceptions raised when a grid layout is rejected."""
from __future__ import annotations

from typing import Any, Dict


class LayoutError(ValueError):
    """Base class for layout rejections.

    ``kind`` is a stable, machine-checkable name and ``context`` carries the
    offending row/cell so callers can build their own messages.
    """

    kind = "LayoutError"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context: Dict[str, Any] = context

    def as_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "detail": str(self), "context": self.context}


class EmptyLayout(LayoutError):
    kind = "EmptyLayout"


class InvalidCellField(LayoutError):
    kind = "InvalidCellField"


class DuplicateSlot(LayoutError):
    kind = "DuplicateSlot"


class InvalidRowLayout(LayoutError):
    kind = "InvalidRowLayout"


class RowSumMismatch(LayoutError):
    kind = "RowSumMismatch"
