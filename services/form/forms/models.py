"""Database models for the form service."""
from __future__ import annotations

import re
from typing import Iterable, List

from django.db import models

from .layout import GridCell

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")

# Paths under /api/forms/ that are not form slugs.
RESERVED_SLUGS = frozenset({"preview"})


def slugify(value: str) -> str:
    """Lowercase ``value`` and collapse every run of other characters into ``-``."""

    return _SLUG_SEPARATORS.sub("-", value.lower().strip()).strip("-")


class Form(models.Model):
    """A published form whose questions are arranged on a 12-column grid."""

    slug = models.SlugField(max_length=255, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return f"{self.title} ({self.slug})"

    @classmethod
    def unique_slug(cls, base: str) -> str:
        """Return ``base``, or ``base-2``, ``base-3``... whichever is free."""

        max_length = cls._meta.get_field("slug").max_length
        base = (base or "form")[:max_length]
        taken = cls.objects.all()
        candidate, suffix = base, 1
        while candidate in RESERVED_SLUGS or taken.filter(slug=candidate).exists():
            suffix += 1
            tail = f"-{suffix}"
            candidate = base[: max_length - len(tail)].rstrip("-") + tail
        return candidate

    def grid(self) -> List[GridCell]:
        return [cell.as_grid_cell() for cell in self.cells.all()]

    def replace_layout(self, cells: Iterable[GridCell]) -> None:
        """Swap the whole grid for ``cells``; callers wrap this in a transaction."""

        self.cells.all().delete()
        FormCell.objects.bulk_create(
            FormCell(
                form=self,
                question_id=cell.question_id,
                row=cell.row,
                col=cell.col,
                span=cell.span,
                order=index,
            )
            for index, cell in enumerate(cells)
        )


class FormCell(models.Model):
    """A question placed at ``(row, col)`` of a form's grid."""

    form = models.ForeignKey(Form, related_name="cells", on_delete=models.CASCADE)
    question = models.ForeignKey(
        "questions.Question", related_name="placements", on_delete=models.PROTECT
    )
    row = models.PositiveIntegerField()
    col = models.PositiveSmallIntegerField()
    span = models.PositiveSmallIntegerField()
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["row", "col", "order", "id"]
        unique_together = ("form", "row", "col")

    def __str__(self) -> str:
        return f"{self.form_id}: r{self.row}c{self.col} span {self.span}"

    def as_grid_cell(self) -> GridCell:
        return GridCell(question_id=self.question_id, row=self.row, col=self.col, span=self.span)
